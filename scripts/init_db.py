from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.driver_ops.driver_ops.database.bootstrap import SchemaInstaller
from src.driver_ops.driver_ops.database.connection import DBConfig


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_mapping(settings.DB_CONFIG)

    installer = SchemaInstaller(config)
    count = installer.apply(REPO_ROOT / "database" / "schema.sql")
    missing = installer.missing_tables()

    print(f"Applied {count} statements from schema.sql -> {config.describe()} (tables={len(installer.tables())})")
    if missing:
        print(f"Missing tables: {', '.join(missing)}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
