from fastapi import Request

from realtime.services.realtime_service import RealtimeService


def get_realtime_service(request: Request) -> RealtimeService:
    return request.app.state.realtime_service  # type: ignore[return-value]
