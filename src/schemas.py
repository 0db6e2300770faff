from typing import List, Optional
from pydantic import BaseModel
from core.models.dashboard_state import DashboardStatus
from core.polling_scheduler import SchedulerState


class AppHealthOK(BaseModel):
    status: str
    app: str


class ParameterView(BaseModel):
    name: str
    display_name: str
    value: Optional[float] = None
    timestamp: Optional[float] = None
    unit: str
    threshold: float
    color: str
    alert: bool


class DashboardResponse(BaseModel):
    status: DashboardStatus
    error: Optional[str] = None
    parameters: List[ParameterView]


class AlertsResponse(BaseModel):
    alerts: List[str]


class PollingStatusResponse(BaseModel):
    state: SchedulerState
    source: str
    interval: float
    ticks_fired: int
    ticks_skipped: int
    samples_ok: int
    samples_failed: int
    consecutive_failures: int
    last_success_time: Optional[float] = None
