from typing import List

from fastapi import APIRouter, Depends

from realtime.api.dependencies import get_realtime_service
from realtime.api.schemas import GetReportRequest, ProjectRequest, ReportRequest
from realtime.domain.models import RealTimeQueryResult, RealTimeReport
from realtime.services.realtime_service import RealtimeService

router = APIRouter(prefix="/realtime", tags=["realtime"])


@router.post("/create", summary="Create realtime report")
async def create_report(
    report: RealTimeReport, svc: RealtimeService = Depends(get_realtime_service)
):
    return await svc.create(report)


@router.post("/get", summary="Get realtime report", response_model=RealTimeQueryResult)
async def get_report(
    body: GetReportRequest, svc: RealtimeService = Depends(get_realtime_service)
):
    return await svc.read(
        body.project,
        body.name,
        filter=body.filter,
        aggregate=body.aggregate,
        date_start=body.date_start,
        date_end=body.date_end,
    )


@router.post(
    "/list", summary="List realtime reports", response_model=List[RealTimeReport]
)
async def list_reports(
    body: ProjectRequest, svc: RealtimeService = Depends(get_realtime_service)
):
    return await svc.list(body.project)


@router.post("/delete", summary="Delete realtime report")
async def delete_report(
    body: ReportRequest, svc: RealtimeService = Depends(get_realtime_service)
):
    return await svc.delete(body.project, body.name)
