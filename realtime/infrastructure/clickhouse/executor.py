from __future__ import annotations

import asyncio
from typing import Callable, Dict

from clickhouse_driver.errors import Error as ClickHouseError

from realtime.core.logger import get_logger
from realtime.domain.models import QueryResult

from .client import ClickHouseClient

logger = get_logger("realtime.executor")


class ClickHouseQueryExecutor:
    """Runs report queries inside the project's database.

    Driver errors are returned as failed results rather than raised.
    """

    def __init__(
        self, client_factory: Callable[[str], ClickHouseClient] = ClickHouseClient
    ):
        self._client_factory = client_factory
        self._clients: Dict[str, ClickHouseClient] = {}

    def _client(self, project: str) -> ClickHouseClient:
        client = self._clients.get(project)
        if client is None:
            client = self._clients[project] = self._client_factory(project)
        return client

    async def execute_query(self, project: str, query: str) -> QueryResult:
        client = self._client(project)
        try:
            rows = await asyncio.to_thread(client.execute, query)
        except ClickHouseError as e:
            logger.error(
                "query_execution_failed",
                extra={"project": project, "query": query, "error": str(e)},
            )
            return QueryResult(error=str(e))
        return QueryResult(rows=[list(row) for row in rows])

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()
