"""Continuous queries backed by ClickHouse materialized views.

Each continuous query becomes a materialized view in the project's database,
named after the query's table. The definitions themselves live in a registry
table so they can be listed and read back.
"""

from __future__ import annotations

import asyncio
import json
from typing import Callable, List, Optional

from realtime.core.config import settings
from realtime.core.logger import get_logger
from realtime.domain.errors import ContinuousQueryExistsError, ProjectNotFoundError
from realtime.domain.models import ContinuousQuery
from realtime.query.compiler import continuous_table

from .client import ClickHouseClient
from .ddl import ALL_DDLS, continuous_view_ddl, drop_continuous_view_ddl

logger = get_logger("realtime.continuous")

_COLUMNS = "project, name, table_name, query, sort_key, collections, options"


class ClickHouseContinuousQueryService:
    def __init__(
        self,
        client: ClickHouseClient,
        client_factory: Callable[[str], ClickHouseClient] = ClickHouseClient,
    ):
        self.client = client
        self.registry = settings.realtime_registry_table
        self._client_factory = client_factory

    def _run_in_project(self, project: str, statement: str) -> None:
        # View queries name the stream unqualified, so DDL runs inside the project
        project_client = self._client_factory(project)
        try:
            project_client.execute(statement)
        finally:
            project_client.close()

    def ensure_tables(self) -> None:
        for ddl in ALL_DDLS:
            self.client.execute(ddl)

    async def create(self, query: ContinuousQuery) -> None:
        await asyncio.to_thread(self._create, query)

    async def get(self, project: str, name: str) -> Optional[ContinuousQuery]:
        return await asyncio.to_thread(self._get, project, name)

    async def list(self, project: str) -> List[ContinuousQuery]:
        return await asyncio.to_thread(self._list, project)

    async def delete(self, project: str, name: str) -> None:
        await asyncio.to_thread(self._delete, project, name)

    def _create(self, query: ContinuousQuery) -> None:
        if not self.client.database_exists(query.project):
            raise ProjectNotFoundError(query.project)
        if self._get(query.project, query.name) is not None:
            raise ContinuousQueryExistsError(query.project, query.name)

        table = continuous_table(query.table_name)
        self._run_in_project(
            query.project, continuous_view_ddl(table, query.sort_key, query.query)
        )
        try:
            self.client.execute(
                f"INSERT INTO {self.registry} ({_COLUMNS}) VALUES",
                [
                    (
                        query.project,
                        query.name,
                        query.table_name,
                        query.query,
                        query.sort_key,
                        query.collections,
                        json.dumps(query.options or {}),
                    )
                ],
            )
        except Exception:
            # A view without a registry row could never be listed or deleted
            self._run_in_project(query.project, drop_continuous_view_ddl(table))
            raise
        logger.info(
            "continuous_query_created",
            extra={"project": query.project, "table_name": query.table_name},
        )

    def _get(self, project: str, name: str) -> Optional[ContinuousQuery]:
        rows = self.client.execute(
            f"SELECT {_COLUMNS} FROM {self.registry} FINAL "
            "WHERE project = %(project)s AND name = %(name)s LIMIT 1",
            {"project": project, "name": name},
        )
        return self._from_row(rows[0]) if rows else None

    def _list(self, project: str) -> List[ContinuousQuery]:
        rows = self.client.execute(
            f"SELECT {_COLUMNS} FROM {self.registry} FINAL "
            "WHERE project = %(project)s ORDER BY name",
            {"project": project},
        )
        return [self._from_row(row) for row in rows]

    def _delete(self, project: str, name: str) -> None:
        query = self._get(project, name)
        if query is not None:
            self._run_in_project(
                project, drop_continuous_view_ddl(continuous_table(query.table_name))
            )
        self.client.execute(
            f"ALTER TABLE {self.registry} DELETE "
            "WHERE project = %(project)s AND name = %(name)s",
            {"project": project, "name": name},
        )
        logger.info(
            "continuous_query_deleted", extra={"project": project, "report": name}
        )

    @staticmethod
    def _from_row(row) -> ContinuousQuery:
        project, name, table_name, query, sort_key, collections, options = row
        return ContinuousQuery(
            project=project,
            name=name,
            table_name=table_name,
            query=query,
            sort_key=list(sort_key),
            collections=list(collections),
            options=json.loads(options) if options else None,
        )
