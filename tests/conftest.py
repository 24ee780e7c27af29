from typing import Dict, List, Optional, Tuple

import pytest

from realtime.domain.errors import ContinuousQueryExistsError, ProjectNotFoundError
from realtime.domain.models import ContinuousQuery, QueryResult
from realtime.services.realtime_service import RealtimeService

# 2025-01-01T00:00:00Z, a multiple of the bucket width
NOW = 1_735_689_600


class DummyContinuousQueryService:
    def __init__(self, projects: Tuple[str, ...] = ("demo",)):
        self.projects = set(projects)
        self.queries: Dict[Tuple[str, str], ContinuousQuery] = {}
        self.calls: List[str] = []

    async def create(self, query: ContinuousQuery) -> None:
        self.calls.append("create")
        if query.project not in self.projects:
            raise ProjectNotFoundError(query.project)
        if (query.project, query.name) in self.queries:
            raise ContinuousQueryExistsError(query.project, query.name)
        self.queries[(query.project, query.name)] = query

    async def get(self, project: str, name: str) -> Optional[ContinuousQuery]:
        self.calls.append("get")
        return self.queries.get((project, name))

    async def list(self, project: str) -> List[ContinuousQuery]:
        self.calls.append("list")
        return [q for (p, _), q in self.queries.items() if p == project]

    async def delete(self, project: str, name: str) -> None:
        self.calls.append("delete")
        self.queries.pop((project, name), None)


class DummyExecutor:
    def __init__(self, result: Optional[QueryResult] = None):
        self.result = result or QueryResult(rows=[])
        self.queries: List[Tuple[str, str]] = []

    async def execute_query(self, project: str, query: str) -> QueryResult:
        self.queries.append((project, query))
        return self.result


@pytest.fixture
def store():
    return DummyContinuousQueryService()


@pytest.fixture
def executor():
    return DummyExecutor()


@pytest.fixture
def service(store, executor):
    return RealtimeService(store, executor, clock=lambda: NOW)
