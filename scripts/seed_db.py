"""Load database/seed.sql and (re)create the demo teacher and coordinator."""

from __future__ import annotations

from pathlib import Path

from config import load_settings

from generus_attendance.database.bootstrap import apply_seed_sql, describe_target, ensure_demo_accounts

SEED = Path(__file__).resolve().parents[1] / "database" / "seed.sql"


def main() -> None:
    db_config = dict(load_settings().DB_CONFIG)
    apply_seed_sql(db_config, seed_path=SEED)
    ensure_demo_accounts(db_config)
    print(f"demo generus, teacher and coordinator seeded into {describe_target(db_config)}")
    print("  teacher login:     guru@example.com / guru123")
    print("  coordinator login: Koordinator Demo / koord1234567890")


if __name__ == "__main__":
    main()
