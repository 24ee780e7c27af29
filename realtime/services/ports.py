"""Collaborators the report service depends on."""

from typing import List, Optional, Protocol

from realtime.domain.models import ContinuousQuery, QueryResult


class ContinuousQueryService(Protocol):
    async def create(self, query: ContinuousQuery) -> None:
        """Persist and start ``query``.

        Raises ProjectNotFoundError, or ContinuousQueryExistsError when the
        name is taken.
        """

    async def get(self, project: str, name: str) -> Optional[ContinuousQuery]: ...

    async def list(self, project: str) -> List[ContinuousQuery]: ...

    async def delete(self, project: str, name: str) -> None: ...


class QueryExecutor(Protocol):
    async def execute_query(self, project: str, query: str) -> QueryResult: ...
