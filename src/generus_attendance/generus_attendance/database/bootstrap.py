from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

_CREATE_DATABASE = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DATABASE = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


@contextmanager
def _admin_connection(db_config: dict, *, with_database: bool = True) -> Iterator:
    """Connection for setup scripts; committed on success, always closed."""

    target = DBConfig.from_dict(db_config)
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database

    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # the target database comes from DB_CONFIG, not from the script
    return _USE_DATABASE.sub("", _CREATE_DATABASE.sub("", sql))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quotes and skip '--' comment lines."""

    buf: list[str] = []
    quote = None
    escaped = False

    body = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))
    for ch in body:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        elif ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_script(db_config: dict, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with _admin_connection(db_config) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with _admin_connection(db_config, with_database=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _exec_script(db_config, schema_path)
    logger.info("schema applied from %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _exec_script(db_config, seed_path)
    logger.info("seed applied from %s (%d statements)", seed_path, count)


def ensure_demo_accounts(db_config: dict) -> None:
    """Create or refresh the demo teacher and coordinator logins."""

    with _admin_connection(db_config) as conn:
        cur = conn.cursor(dictionary=True)

        def upsert_teacher(full_name: str, email: str, username: str, password: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT teacher_id FROM teachers WHERE username=%s", (username,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE teachers
                    SET full_name=%s, email=%s, password_hash=%s, is_active=1
                    WHERE username=%s
                    """,
                    (full_name, email, password_hash, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO teachers (full_name, email, username, password_hash)
                    VALUES (%s, %s, %s, %s)
                    """,
                    (full_name, email, username, password_hash),
                )

        def upsert_coordinator(name: str, access_code: str) -> None:
            code_hash = generate_password_hash(access_code)
            cur.execute("SELECT coordinator_id FROM coordinators WHERE name=%s", (name,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE coordinators SET access_code_hash=%s, is_active=1 WHERE name=%s",
                    (code_hash, name),
                )
            else:
                cur.execute(
                    "INSERT INTO coordinators (name, access_code_hash) VALUES (%s, %s)",
                    (name, code_hash),
                )

        upsert_teacher("Guru Demo", "guru@example.com", "gurudemo", "guru123")
        upsert_coordinator("Koordinator Demo", "koord1234567890")

    logger.info("demo teacher and coordinator accounts ready")


def list_tables(db_config: dict) -> list[str]:
    with _admin_connection(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def describe_target(db_config: dict) -> str:
    """``user@host:port/database`` for log lines; never includes the password."""

    target = DBConfig.from_dict(db_config)
    return f"{target.user}@{target.host}:{target.port}/{target.database}"
