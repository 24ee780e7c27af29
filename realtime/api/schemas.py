from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProjectRequest(BaseModel):
    project: str


class ReportRequest(ProjectRequest):
    name: str


class GetReportRequest(ReportRequest):
    filter: Optional[str] = None
    aggregate: bool = False
    date_start: Optional[datetime] = Field(
        None, description="Defaults to the configured window before now"
    )
    date_end: Optional[datetime] = Field(
        None, description="Leaves the upper edge open when omitted"
    )
