"""MySQL access for the attendance repositories.

Outline
MySQLSettings   connection parameters read from ``DB_CONFIG``
MySQLSession    short-lived connection per call, transaction scope, and the
                insert-if-absent primitive the one-record-per-day rule rests on
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Sequence

import mysql.connector
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MySQLSettings:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_mapping(cls, db_config: Mapping[str, Any]) -> "MySQLSettings":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config["database"]),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        )


class MySQLSession:
    """Opens one connection per repository call; nothing is pooled or shared between threads."""

    def __init__(self, settings: MySQLSettings, *, connect: Callable[..., Any] = mysql.connector.connect):
        self.settings = settings
        self._connect = connect

    def _open(self):
        return self._connect(
            host=self.settings.host,
            port=self.settings.port,
            user=self.settings.user,
            password=self.settings.password,
            database=self.settings.database,
            connection_timeout=self.settings.connect_timeout,
        )

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Yield a dictionary cursor; commit on success, roll back on any error."""
        conn = self._open()
        try:
            cur = conn.cursor(dictionary=True, buffered=True)
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def insert_if_absent(self, sql: str, params: Sequence[Any]) -> bool:
        """Run a plain INSERT against a unique key.

        Returns False when the key already exists (the losing writer of a
        race); every other driver error propagates.
        """
        try:
            with self.transaction() as cur:
                cur.execute(sql, tuple(params))
            return True
        except IntegrityError as exc:
            if exc.errno != errorcode.ER_DUP_ENTRY:
                raise
            logger.debug("Duplicate key on insert: %s", exc.msg)
            return False

    def fetch_one(self, sql: str, params: Sequence[Any]) -> dict | None:
        with self.transaction() as cur:
            cur.execute(sql, tuple(params))
            return cur.fetchone() or None

    def fetch_all(self, sql: str, params: Sequence[Any]) -> list[dict]:
        with self.transaction() as cur:
            cur.execute(sql, tuple(params))
            return list(cur.fetchall() or [])
