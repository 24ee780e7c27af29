from unittest.mock import MagicMock, patch

from realtime.infrastructure.clickhouse.client import ClickHouseClient


def test_client_uses_requested_database():
    with patch("realtime.infrastructure.clickhouse.client.Client") as mock_client_cls:
        ClickHouseClient("demo")
        assert mock_client_cls.call_args.kwargs["database"] == "demo"

        ClickHouseClient()
        assert mock_client_cls.call_args.kwargs["database"] == "analytics"


def test_database_exists():
    with patch("realtime.infrastructure.clickhouse.client.Client") as mock_client_cls:
        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client
        mock_client.execute.return_value = [(1,)]

        ch = ClickHouseClient()
        assert ch.database_exists("demo")
        query, params = mock_client.execute.call_args[0]
        assert "system.databases" in query
        assert params == {"name": "demo"}

        mock_client.execute.return_value = [(0,)]
        assert not ch.database_exists("missing")


def test_close_disconnects():
    with patch("realtime.infrastructure.clickhouse.client.Client") as mock_client_cls:
        mock_client = MagicMock()
        mock_client_cls.return_value = mock_client
        ClickHouseClient().close()
        mock_client.disconnect.assert_called_once()
