from shared.config import BaseServiceConfig


class Settings(BaseServiceConfig):
    # Windows
    realtime_bucket_width_seconds: int = 5
    realtime_default_window_seconds: int = 45
    realtime_query_limit: int = 5000  # hard cap on rows returned per read

    # Event stream / continuous tables
    realtime_stream_source: str = "stream"
    realtime_event_time_column: str = "_time"
    realtime_continuous_table_prefix: str = "continuous_"
    realtime_registry_table: str = "continuous_queries"
    realtime_view_engine: str = "AggregatingMergeTree"

    # Startup
    clickhouse_connect_retries: int = 6

    otel_service_name: str = "realtime"


settings = Settings()
