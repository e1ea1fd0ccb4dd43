"""Dump the attendance database to backups/<db>_<timestamp>.sql.

Needs the ``mysqldump`` client on PATH. The password travels in
``MYSQL_PWD`` so it stays out of the process list.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

from config import load_settings

BACKUP_DIR = Path(__file__).resolve().parents[1] / "backups"


def dump_command(db: dict) -> list[str]:
    return [
        "mysqldump",
        "--host", str(db.get("host", "localhost")),
        "--port", str(db.get("port", 3306)),
        "--user", str(db.get("user", "root")),
        "--single-transaction",
        "--routines",
        str(db["database"]),
    ]


def main() -> None:
    if shutil.which("mysqldump") is None:
        raise SystemExit("mysqldump not found; install the MySQL client tools first")

    db = load_settings().DB_CONFIG
    BACKUP_DIR.mkdir(parents=True, exist_ok=True)
    target = BACKUP_DIR / f"{db['database']}_{datetime.now():%Y%m%d_%H%M%S}.sql"

    with target.open("wb") as out:
        proc = subprocess.run(
            dump_command(db),
            stdout=out,
            stderr=subprocess.PIPE,
            env={**os.environ, "MYSQL_PWD": str(db.get("password", ""))},
        )
    if proc.returncode != 0:
        target.unlink(missing_ok=True)
        raise SystemExit(proc.stderr.decode(errors="replace").strip() or "mysqldump failed")
    print(f"backup written to {target}")


if __name__ == "__main__":
    main()
