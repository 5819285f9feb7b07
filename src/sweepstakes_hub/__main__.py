"""
CLI entry.

  python -m sweepstakes_hub serve [--host 127.0.0.1] [--port 8000]
  python -m sweepstakes_hub seed     -> create tables and insert the demo catalogue
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from sweepstakes_hub.core.config import get_settings
from sweepstakes_hub.core.database import dispose_database, init_database
from sweepstakes_hub.core.logging import setup_logging
from sweepstakes_hub.seed import seed_demo


async def _seed() -> int:
    settings = get_settings()
    setup_logging(settings)
    manager = await init_database(settings.database_url)
    try:
        await manager.create_all()
        created = await seed_demo(manager)
    finally:
        await dispose_database()
    print("Seed complete:", created, "competitions created")
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="sweepstakes_hub")
    sub = parser.add_subparsers(dest="command", required=True)
    serve = sub.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    sub.add_parser("seed", help="Create tables and seed demo competitions")
    args = parser.parse_args(argv)

    if args.command == "seed":
        sys.exit(asyncio.run(_seed()))

    import uvicorn

    uvicorn.run("sweepstakes_hub.main:app", host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
