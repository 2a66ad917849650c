from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from smallfarm.application.services.crop_service import seed_system_crops  # noqa: E402
from smallfarm.infra.farm_store import SqliteFarmStore  # noqa: E402
from smallfarm.observability.logging_utils import init_logging  # noqa: E402


def _resolve_path(value: str) -> Path:
    return Path(value).expanduser()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed the built-in crop catalogue into a SQLite farm store."
    )
    parser.add_argument(
        "--db",
        default=os.getenv("FARM_STORE_PATH"),
        required=False,
        help="SQLite path (defaults to FARM_STORE_PATH or .cache/smallfarm.sqlite3).",
    )
    args = parser.parse_args()

    if args.db:
        db_path = _resolve_path(args.db)
    else:
        db_path = ROOT / ".cache" / "smallfarm.sqlite3"

    init_logging()
    store = SqliteFarmStore(path=db_path)
    seeded = seed_system_crops(store)
    total = len(store.list_system_crops())
    print(f"Seeded {seeded} crops into {db_path} ({total} system crops in total).")


if __name__ == "__main__":
    main()
