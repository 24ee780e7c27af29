from realtime.core.config import settings

REGISTRY_DDL = f"""
CREATE TABLE IF NOT EXISTS {settings.realtime_registry_table} (
    project String,
    name String,
    table_name String,
    query String,
    sort_key Array(String),
    collections Array(String),
    options String
) ENGINE = ReplacingMergeTree()
ORDER BY (project, name)
"""

ALL_DDLS = [
    REGISTRY_DDL,
]


def continuous_view_ddl(table: str, sort_key: list[str], query: str) -> str:
    # No IF NOT EXISTS: a leftover view must not keep serving an older query
    return (
        f"CREATE MATERIALIZED VIEW {table} "
        f"ENGINE = {settings.realtime_view_engine} "
        f"ORDER BY ({', '.join(sort_key)}) "
        f"AS {query}"
    )


def drop_continuous_view_ddl(table: str) -> str:
    return f"DROP VIEW IF EXISTS {table}"
