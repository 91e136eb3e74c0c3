# tourist_router/cli.py
import argparse
from typing import List, Optional

import uvicorn

from tourist_router.core.config import settings
from tourist_router.routing.dataset_builder import build_from_place


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Build a SQLite routing extract from OpenStreetMap.")
    parser.add_argument("--place", default=settings.OSM_PLACE, help="Place name understood by Nominatim.")
    parser.add_argument(
        "--network-type",
        default=settings.OSM_NETWORK_TYPE,
        choices=["all", "all_public", "bike", "drive", "drive_service", "walk"],
    )
    parser.add_argument("--out", default=settings.GRAPH_DB_PATH, help="Output SQLite file.")
    args = parser.parse_args(argv)

    nodes, edges = build_from_place(args.place, args.out, network_type=args.network_type)
    print(f"{args.out}: {nodes} nodes, {edges} edges")


def serve(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run the routing API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development).")
    args = parser.parse_args(argv)

    uvicorn.run(
        "tourist_router.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
