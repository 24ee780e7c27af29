"""ClickHouse client wrapper."""

from __future__ import annotations

import threading
from typing import Any

from clickhouse_driver import Client

from realtime.core.config import settings


class ClickHouseClient:
    def __init__(self, database: str | None = None):
        self.database = database or settings.clickhouse_db
        self.client = Client(
            host=settings.clickhouse_host,
            port=settings.clickhouse_port,
            user=settings.clickhouse_user,
            password=settings.clickhouse_password,
            database=self.database,
        )
        # clickhouse-driver raises PartiallyConsumedQueryError when queries
        # overlap on one connection; calls arrive from asyncio.to_thread workers.
        self._lock = threading.RLock()

    def execute(self, query: str, params: Any = None) -> list:
        with self._lock:
            return self.client.execute(query, params)

    def ping(self) -> None:
        self.execute("SELECT 1")

    def database_exists(self, name: str) -> bool:
        rows = self.execute(
            "SELECT count() FROM system.databases WHERE name = %(name)s",
            {"name": name},
        )
        return bool(rows and rows[0][0])

    def close(self) -> None:
        self.client.disconnect()
