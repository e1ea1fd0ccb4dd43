from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError


@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` for one unit of work.

    Everything executed inside the block is committed together, or rolled back
    together if the block raises.
    """

    conn = conn_factory.connect()
    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or ())


def is_duplicate_key(err: Exception) -> bool:
    """True for a UNIQUE / PRIMARY KEY violation (MySQL error 1062)."""
    return isinstance(err, IntegrityError) and getattr(err, "errno", None) == errorcode.ER_DUP_ENTRY


def in_clause(values: Sequence[object]) -> str:
    """Placeholder list for ``IN (...)``; callers must pass a non-empty sequence."""
    return ", ".join(["%s"] * len(values))


def build_where(clauses: Sequence[str]) -> str:
    return f"WHERE {' AND '.join(clauses)}" if clauses else ""
