import asyncio

from fastapi import APIRouter, Request, Response

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request):
    try:
        await asyncio.to_thread(request.app.state.clickhouse.ping)
        return {"status": "ok", "clickhouse": "ok"}
    except Exception as e:
        return Response(status_code=503, content=str(e))
