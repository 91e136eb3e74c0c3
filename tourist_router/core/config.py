# tourist_router/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (.env file).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Tourist Router API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # SQLite file with `nodes(id, lat, lon)` and `edges(from_node, to_node)`
    GRAPH_DB_PATH: str = "data/graph.db"
    # SQLite file with `pois(id, name, category, lat, lon)`; no POIs when unset
    POI_DB_PATH: Optional[str] = None

    # Spatial grid used for nearest-node lookups
    GRID_CELL_SIZE_DEG: float = 0.005
    GRID_MAX_RING: int = 8

    # Safety valve for A* on pathological queries (0 disables the cap)
    ASTAR_MAX_EXPANSIONS: int = 2_000_000

    POI_RADIUS_M: float = 500.0

    # Only snap route endpoints onto the largest directed component
    ENDPOINTS_LARGEST_COMPONENT_ONLY: bool = False

    # Build the graph when the app starts instead of on the first request
    GRAPH_WARMUP_ON_STARTUP: bool = False

    # Defaults for the dataset builder, e.g. "Kandy, Sri Lanka"
    OSM_PLACE: str = "Kandy, Sri Lanka"
    OSM_NETWORK_TYPE: str = "walk"


settings = Settings()
