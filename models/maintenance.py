"""
Maintenance Task Models for FlightOps

A maintenance task is one trackable requirement (inspection, AD, SB,
component replacement...) for one aircraft. Due points are never stored:
they are projected from the tracking configuration on every read.

Collection: maintenance_tasks
"""

from pydantic import BaseModel, Field, field_serializer, model_validator
from typing import Optional, List
from datetime import datetime, date
import math
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class MaintenanceItemType(str, Enum):
    INSPECTION = "Inspection"
    SERVICE_BULLETIN = "Service Bulletin"
    AIRWORTHINESS_DIRECTIVE = "Airworthiness Directive"
    COMPONENT_REPLACEMENT = "Component Replacement"
    OVERHAUL = "Overhaul"
    LIFE_LIMITED_PART = "Life Limited Part"
    OTHER = "Other"


class TrackType(str, Enum):
    INTERVAL = "Interval"
    ONE_TIME = "One Time"
    DONT_ALERT = "Dont Alert"


class DaysIntervalType(str, Enum):
    DAYS = "days"
    MONTHS_SPECIFIC_DAY = "months_specific_day"
    MONTHS_EOM = "months_eom"  # End of month
    YEARS_SPECIFIC_DAY = "years_specific_day"


class DueUnit(str, Enum):
    DAYS = "days"
    HOURS = "hrs"
    CYCLES = "cycles"
    NONE = "N/A"


class MaintenanceStatus(str, Enum):
    """Urgency classification shown in task tables and fleet cards"""
    OK = "OK"
    DUE_SOON = "Due Soon"
    GRACE_PERIOD = "Grace Period"
    OVERDUE = "Overdue"
    MISSING_COMPONENT_TIME = "Missing Component Time"
    INVALID_INPUT = "Invalid Input"
    NEVER_COMPLETED = "Never Completed"
    NOT_APPLICABLE = "N/A"


# ============================================================
# TASK DOCUMENT
# ============================================================

DATE_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD (or a full ISO timestamp) to a calendar date"""
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    try:
        if "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return datetime.strptime(value, DATE_FORMAT).date()
    except (ValueError, TypeError):
        return None


def _is_positive_int_string(value: str) -> bool:
    try:
        return int(value.strip()) > 0
    except ValueError:
        return False


class MaintenanceTaskBase(BaseModel):
    item_title: str = Field(..., min_length=1)
    reference_number: Optional[str] = None
    part_number: Optional[str] = None
    serial_number: Optional[str] = None
    item_type: MaintenanceItemType = MaintenanceItemType.INSPECTION
    associated_component: Optional[str] = None  # Falls back to the aircraft default
    details: Optional[str] = None
    is_active: bool = True
    track_type: TrackType = TrackType.INTERVAL
    is_trips_not_affected: bool = False

    # Baseline (last completion)
    last_completed_date: Optional[str] = None  # YYYY-MM-DD
    last_completed_hours: Optional[float] = Field(None, ge=0)
    last_completed_cycles: Optional[int] = Field(None, ge=0)
    last_completed_notes: Optional[str] = None

    # Hours due
    is_hours_due_enabled: bool = False
    hours_due: Optional[float] = None
    hours_tolerance: Optional[float] = Field(None, ge=0)
    alert_hours_prior: Optional[float] = Field(None, ge=0)

    # Cycles due
    is_cycles_due_enabled: bool = False
    cycles_due: Optional[int] = None
    cycles_tolerance: Optional[int] = Field(None, ge=0)
    alert_cycles_prior: Optional[int] = Field(None, ge=0)

    # Days due: interval magnitude (Interval) or YYYY-MM-DD (One Time)
    is_days_due_enabled: bool = False
    days_interval_type: Optional[DaysIntervalType] = None
    days_due_value: Optional[str] = None
    days_tolerance: Optional[int] = Field(None, ge=0)
    alert_days_prior: Optional[int] = Field(None, ge=0)


class MaintenanceTaskCreate(MaintenanceTaskBase):
    """Payload for creating or saving a task; enforces the due-value rules"""

    @model_validator(mode="after")
    def check_enabled_due_values(self):
        if self.is_hours_due_enabled and (self.hours_due is None or self.hours_due <= 0):
            raise ValueError("hours_due must be positive when hours tracking is enabled")

        if self.is_cycles_due_enabled and (self.cycles_due is None or self.cycles_due <= 0):
            raise ValueError("cycles_due must be a positive integer when cycles tracking is enabled")

        if self.is_days_due_enabled:
            value = (self.days_due_value or "").strip()
            if not value:
                raise ValueError("days_due_value is required when days tracking is enabled")
            if self.track_type == TrackType.ONE_TIME and parse_iso_date(value) is None:
                raise ValueError("days_due_value must be a YYYY-MM-DD date for One Time tasks")
            if self.track_type == TrackType.INTERVAL:
                if self.days_interval_type is None:
                    raise ValueError("days_interval_type is required for Interval day tracking")
                if not _is_positive_int_string(value):
                    raise ValueError("days_due_value must be a positive whole number for Interval tasks")

        if self.last_completed_date and parse_iso_date(self.last_completed_date) is None:
            raise ValueError("last_completed_date must be YYYY-MM-DD")
        return self


class MaintenanceTask(MaintenanceTaskBase):
    """Stored task document. No validation beyond types: old documents may be incomplete."""
    id: str = Field(alias="_id")
    aircraft_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


# ============================================================
# DERIVED (never persisted)
# ============================================================

class AlertThresholds(BaseModel):
    """Default alert-prior values used when a task has none of its own"""
    days: int = 30
    hours: float = 25.0
    cycles: int = 50


class DueProjection(BaseModel):
    due_date: Optional[str] = None  # YYYY-MM-DD
    due_at_hours: Optional[float] = None
    due_at_cycles: Optional[int] = None
    baseline_missing: bool = False
    invalid_due_value: Optional[str] = None


class RemainingStatus(BaseModel):
    text: str
    numeric: Optional[float] = None  # inf when nothing to count down, None for invalid input
    unit: DueUnit = DueUnit.NONE
    is_overdue: bool = False
    status: MaintenanceStatus = MaintenanceStatus.NOT_APPLICABLE
    reason: str = ""
    component: Optional[str] = None

    @field_serializer("numeric")
    def serialize_numeric(self, value: Optional[float]) -> Optional[float]:
        # JSON has no infinity
        if value is None or math.isinf(value):
            return None
        return value


class TaskDueStatus(BaseModel):
    task_id: str
    aircraft_id: str
    item_title: str
    item_type: MaintenanceItemType
    track_type: TrackType
    projection: DueProjection
    remaining: RemainingStatus


class AircraftDueReport(BaseModel):
    aircraft_id: str
    evaluated_at: date
    tasks: List[TaskDueStatus]
