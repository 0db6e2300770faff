from fastapi import APIRouter, HTTPException

from core.models.dashboard_state import DashboardState
from core.models.parameter_enum import ParameterName
from core.models.threshold_config import ThresholdConfig
from core.service_manager import service_manager
from core.threshold_evaluator import evaluate_alerts
from schemas import AlertsResponse, DashboardResponse, ParameterView

VALID_PARAMETER_VALUES = ", ".join([p.name for p in ParameterName])

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

NOT_STARTED = {
    "description": "Dashboard services are not running.",
    "content": {"application/json": {"example": {"detail": "Dashboard services are not running"}}},
}


def _current() -> tuple[DashboardState, ThresholdConfig]:
    state = service_manager.snapshot()
    if state is None or service_manager.config is None:
        raise HTTPException(status_code=503, detail="Dashboard services are not running")
    return state, service_manager.config.thresholds


def _view(name: ParameterName, state: DashboardState, config: ThresholdConfig, alert: bool) -> ParameterView:
    entry = config[name]
    reading = state.reading(name)
    return ParameterView(
        name=name.name,
        display_name=entry.display_name,
        value=reading.value if reading else None,
        timestamp=reading.timestamp if reading else None,
        unit=entry.unit,
        threshold=entry.threshold,
        color=entry.display_color,
        alert=alert,
    )


@router.get("", response_model=DashboardResponse, responses={503: NOT_STARTED})
async def get_dashboard() -> DashboardResponse:
    """
    Full read model: dashboard status plus one view per parameter.

    - **loading**: not every parameter has been sampled yet.
    - **ready**: every parameter has a reading.
    - **error**: the last sample failed. Last known values are still returned
      and `error` carries the reason.
    """
    state, config = _current()
    alerts = evaluate_alerts(state, config)
    return DashboardResponse(
        status=state.status,
        error=state.error,
        parameters=[_view(name, state, config, alerts[name]) for name in config],
    )


@router.get("/alerts", response_model=AlertsResponse, responses={503: NOT_STARTED})
async def get_alerts() -> AlertsResponse:
    """Names of the parameters currently above their threshold."""
    state, config = _current()
    alerts = evaluate_alerts(state, config)
    return AlertsResponse(alerts=[name.name for name, raised in alerts.items() if raised])


@router.get("/{parameter}", response_model=ParameterView, responses={
    400: {
        "description": "Invalid parameter provided.",
        "content": {
            "application/json": {
                "example": {"detail": f"Invalid parameter: INVALID. Valid values are: {VALID_PARAMETER_VALUES}"}
            }
        }
    },
    503: {
        "description": "Services not running, or parameter not sampled yet.",
        "content": {
            "application/json": {
                "example": {"detail": "Parameter MOISTURE has not been sampled yet"}
            }
        }
    }
})
async def get_parameter(parameter: str) -> ParameterView:
    """Latest reading, threshold and alert flag for one parameter (case-insensitive name)."""
    try:
        name = ParameterName[parameter.upper()]
    except KeyError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid parameter: {parameter}. Valid values are: {VALID_PARAMETER_VALUES}"
        )

    state, config = _current()
    if state.reading(name) is None:
        raise HTTPException(status_code=503, detail=f"Parameter {name.name} has not been sampled yet")

    alerts = evaluate_alerts(state, config)
    return _view(name, state, config, alerts[name])
