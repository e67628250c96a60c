"""
Carelog Timeline API Server
===========================

Stateless HTTP surface over the layout engine. Every request carries the
full event set; nothing is stored between requests.

Endpoints:
- GET  /health
- POST /api/v1/layout/day   -> DayLayout
- POST /api/v1/layout/week  -> WeekView
- POST /api/v1/summary/day  -> DailySummary

Usage:
    uvicorn carelog.api.server:app --reload
"""
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from ..contracts.base import ConfigurationError
from ..contracts.config import GhostMode, TimelineConfig
from ..contracts.layout import ColumnMode
from ..engine import TimelineEngine
from ..mapper import EventMapper, MappingResult
from ..observability import configure_logging
from ..serialization import to_plain
from ..temporal.clock import ReferenceClock

logger = logging.getLogger(__name__)

# Base configuration, read from CARELOG_* variables at startup
base_config: TimelineConfig = TimelineConfig()


@asynccontextmanager
async def lifespan(app: FastAPI):
    global base_config
    configure_logging()
    base_config = TimelineConfig.from_env()
    logger.info("Timeline API ready (timezone=%s, ghost_mode=%s)",
                base_config.timezone, base_config.ghost_mode.value)
    yield
    logger.info("Timeline API shutting down")


app = FastAPI(
    title="Carelog Timeline API",
    version="0.1.0",
    description="Deterministic timeline layout and feed forecasts",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class ConfigOverrides(BaseModel):
    """Per-request overrides of the server config; camelCase or snake_case keys."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    fixed_interval_hours: Optional[float] = Field(None, alias="fixedIntervalHours")
    ghost_mode: Optional[GhostMode] = Field(None, alias="ghostMode")
    show_ghost: Optional[bool] = Field(None, alias="showGhost")
    history_days: Optional[int] = Field(None, alias="historyDays")
    column_tolerance_ratio: Optional[float] = Field(None, alias="columnToleranceRatio")
    label_exclusion_radius: Optional[float] = Field(None, alias="labelExclusionRadius")
    lane_proximity_minutes: Optional[float] = Field(None, alias="laneProximityMinutes")
    min_span_minutes: Optional[int] = Field(None, alias="minSpanMinutes")
    timezone: Optional[str] = None
    week_starts_on: Optional[int] = Field(None, alias="weekStartsOn")


class TimelineRequest(BaseModel):
    subject_id: str
    events: List[Dict[str, Any]] = Field(default_factory=list)
    reference_now: Optional[datetime] = None
    config: Optional[ConfigOverrides] = None


class DayRequest(TimelineRequest):
    day: date
    mode: ColumnMode = ColumnMode.WIDE


class WeekRequest(TimelineRequest):
    selected_date: date


# =============================================================================
# HELPERS
# =============================================================================

def _engine_for(request: TimelineRequest) -> TimelineEngine:
    overrides = request.config.model_dump(exclude_none=True) if request.config else None
    try:
        config = base_config.with_overrides(overrides)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail={"code": e.code.name, "message": e.message})
    return TimelineEngine(config)


def _reference_now(request: TimelineRequest, engine: TimelineEngine) -> datetime:
    if request.reference_now is not None:
        return ReferenceClock.fixed(request.reference_now, engine.config.tzinfo).now()
    return ReferenceClock.live(engine.config.tzinfo).now()


def _map(request: TimelineRequest) -> MappingResult:
    return EventMapper().map_records(request.events)


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
async def health_check():
    return {"status": "online"}


@app.post("/api/v1/layout/day")
async def layout_day(request: DayRequest):
    engine = _engine_for(request)
    mapped = _map(request)
    layout = engine.layout_day(
        mapped.events, request.subject_id, request.day,
        _reference_now(request, engine), request.mode
    )
    return {"layout": to_plain(layout), "rejected": to_plain(list(mapped.rejected)),
            "warnings": to_plain(list(mapped.warnings))}


@app.post("/api/v1/layout/week")
async def layout_week(request: WeekRequest):
    engine = _engine_for(request)
    mapped = _map(request)
    week = engine.build_week(
        mapped.events, request.subject_id, request.selected_date,
        _reference_now(request, engine)
    )
    return {"week": to_plain(week), "rejected": to_plain(list(mapped.rejected)),
            "warnings": to_plain(list(mapped.warnings))}


@app.post("/api/v1/summary/day")
async def summary_day(request: DayRequest):
    engine = _engine_for(request)
    mapped = _map(request)
    summary = engine.summarize_day(
        mapped.events, request.subject_id, request.day,
        _reference_now(request, engine)
    )
    return {"summary": to_plain(summary), "rejected": to_plain(list(mapped.rejected)),
            "warnings": to_plain(list(mapped.warnings))}
