"""Create the database (if needed) and apply database/schema.sql."""

from __future__ import annotations

from pathlib import Path

from config import load_settings

from generus_attendance.database.bootstrap import apply_schema, describe_target, list_tables

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def main() -> None:
    db_config = dict(load_settings().DB_CONFIG)
    apply_schema(db_config, schema_path=SCHEMA)
    print(f"schema applied to {describe_target(db_config)}")
    for name in list_tables(db_config):
        print(f"  - {name}")


if __name__ == "__main__":
    main()
