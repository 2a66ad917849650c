#!/usr/bin/env python
"""
Start the SmallFarm schedules API.

Settings not given on the command line come from the environment / .env.
"""

import os
import sys
import argparse
import uvicorn

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from smallfarm.api.server import create_app
from smallfarm.infra.config import get_config
from smallfarm.observability.logging_utils import init_logging, log_event


def main():
    cfg = get_config()
    parser = argparse.ArgumentParser(
        description="Start the SmallFarm schedules API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
    python run_web.py                       # defaults from .env
    python run_web.py --port 8080           # listen on 8080
    python run_web.py --store memory        # throwaway in-memory store
    python run_web.py --reload              # auto-reload for development
        """
    )

    parser.add_argument(
        '--host',
        type=str,
        default='0.0.0.0',
        help='bind address (default: 0.0.0.0)'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=cfg.fastapi_port,
        help=f'port (default: {cfg.fastapi_port})'
    )

    parser.add_argument(
        '--reload',
        action='store_true',
        help='reload on code changes (development only)'
    )

    parser.add_argument(
        '--store',
        type=str,
        choices=['sqlite', 'memory'],
        default=None,
        help='farm store backend (default: FARM_STORE)'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=1,
        help='worker processes (default: 1)'
    )

    args = parser.parse_args()

    if args.store:
        os.environ['FARM_STORE'] = args.store
        get_config.cache_clear()

    init_logging(log_path=get_config().log_path)
    host = args.host if args.host != '0.0.0.0' else 'localhost'
    log_event(
        "api_launch",
        url=f"http://{host}:{args.port}",
        docs=f"http://{host}:{args.port}/docs",
        store=get_config().farm_store,
    )

    if args.reload or args.workers > 1:
        uvicorn.run(
            "smallfarm.api.server:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=args.workers if not args.reload else 1,
            log_level="info"
        )
    else:
        uvicorn.run(create_app(), host=args.host, port=args.port, log_level="info")


if __name__ == '__main__':
    main()
