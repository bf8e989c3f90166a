"""
Maintenance Due Calculator

Single implementation of the due arithmetic used by every consumer
(aircraft task listing, fleet overview, notification generation).

TWO STEPS:
1. project_due()        task tracking config + baseline -> absolute due points
2. evaluate_remaining() due points + current component times -> remaining + status

PRECEDENCE:
- A due date, when present, governs alone. Hours and cycles are only
  looked at when there is no due date (hours before cycles).

RULES:
- Pure functions: no I/O, no clock reads except the `today` default
- Never raises for data-quality problems, always returns a status
"""

import logging
import math
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from dateutil.relativedelta import relativedelta

from models.component_times import ComponentTime
from models.maintenance import (
    DATE_FORMAT,
    AlertThresholds,
    DaysIntervalType,
    DueProjection,
    DueUnit,
    MaintenanceStatus,
    MaintenanceTaskBase,
    RemainingStatus,
    TaskDueStatus,
    TrackType,
    parse_iso_date,
)

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT = "Airframe"


# ============================================================
# PARSING HELPERS
# ============================================================

def round_half_up(value: float, places: int = 1) -> float:
    """Round ties away from zero (1.25 -> 1.3), not to the even digit"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_interval_value(value: Optional[str]) -> Optional[int]:
    """Interval magnitude from the stored string; None when not a positive number"""
    if value is None:
        return None
    try:
        magnitude = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None
    return magnitude if magnitude > 0 else None


def add_interval(baseline: date, interval_type: DaysIntervalType, magnitude: int) -> date:
    if interval_type == DaysIntervalType.DAYS:
        return baseline + timedelta(days=magnitude)
    if interval_type == DaysIntervalType.MONTHS_SPECIFIC_DAY:
        return baseline + relativedelta(months=magnitude)
    if interval_type == DaysIntervalType.MONTHS_EOM:
        # day=31 clamps to the last day of whatever month we land in
        return baseline + relativedelta(months=magnitude, day=31)
    if interval_type == DaysIntervalType.YEARS_SPECIFIC_DAY:
        return baseline + relativedelta(years=magnitude)
    raise ValueError(f"Unknown interval type: {interval_type}")


# ============================================================
# DUE PROJECTION
# ============================================================

def project_due(
    task: MaintenanceTaskBase,
    today: Optional[date] = None,
    fallback_to_today: bool = False,
) -> DueProjection:
    """
    Convert a task's tracking configuration into absolute due points.

    Interval tasks are baseline-relative. One Time tasks store absolute
    values and are copied through. Dont Alert tasks have no due points.

    When an Interval task has never been completed (no usable
    last_completed_date), no due date is projected unless
    fallback_to_today is set, in which case the baseline is today.
    """
    if task.track_type == TrackType.DONT_ALERT:
        return DueProjection()

    if task.track_type == TrackType.ONE_TIME:
        return _project_one_time(task)

    projection = DueProjection()

    if task.is_days_due_enabled and task.days_interval_type and task.days_due_value:
        magnitude = parse_interval_value(task.days_due_value)
        if magnitude is None:
            projection.invalid_due_value = task.days_due_value
        else:
            baseline = parse_iso_date(task.last_completed_date)
            if baseline is None and fallback_to_today:
                baseline = today or date.today()
            if baseline is None:
                projection.baseline_missing = True
            else:
                due = add_interval(baseline, DaysIntervalType(task.days_interval_type), magnitude)
                projection.due_date = due.strftime(DATE_FORMAT)

    if task.is_hours_due_enabled and task.hours_due is not None:
        projection.due_at_hours = (task.last_completed_hours or 0) + task.hours_due

    if task.is_cycles_due_enabled and task.cycles_due is not None:
        projection.due_at_cycles = int((task.last_completed_cycles or 0) + task.cycles_due)

    return projection


def _project_one_time(task: MaintenanceTaskBase) -> DueProjection:
    projection = DueProjection()

    if task.is_days_due_enabled and task.days_due_value:
        due = parse_iso_date(task.days_due_value)
        if due is None:
            projection.invalid_due_value = task.days_due_value
        else:
            projection.due_date = due.strftime(DATE_FORMAT)

    if task.is_hours_due_enabled and task.hours_due is not None:
        projection.due_at_hours = task.hours_due

    if task.is_cycles_due_enabled and task.cycles_due is not None:
        projection.due_at_cycles = int(task.cycles_due)

    return projection


# ============================================================
# COMPONENT LOOKUP
# ============================================================

def resolve_component_name(task: MaintenanceTaskBase, default_component: str = DEFAULT_COMPONENT) -> str:
    name = (task.associated_component or "").strip()
    return name or default_component


def lookup_component_time(
    component_times: Mapping[str, ComponentTime],
    component_name: str,
) -> Optional[ComponentTime]:
    """Exact key first, then a trimmed case-insensitive match"""
    if component_name in component_times:
        return component_times[component_name]
    wanted = component_name.strip().lower()
    for key, value in component_times.items():
        if key.strip().lower() == wanted:
            return value
    return None


# ============================================================
# CLASSIFICATION
# ============================================================

def _tolerance_for(task: MaintenanceTaskBase, unit: DueUnit) -> float:
    if unit == DueUnit.DAYS:
        return task.days_tolerance or 0
    if unit == DueUnit.HOURS:
        return task.hours_tolerance or 0
    if unit == DueUnit.CYCLES:
        return task.cycles_tolerance or 0
    return 0


def _alert_prior_for(task: MaintenanceTaskBase, unit: DueUnit, thresholds: AlertThresholds) -> float:
    if unit == DueUnit.DAYS:
        return task.alert_days_prior if task.alert_days_prior is not None else thresholds.days
    if unit == DueUnit.HOURS:
        return task.alert_hours_prior if task.alert_hours_prior is not None else thresholds.hours
    if unit == DueUnit.CYCLES:
        return task.alert_cycles_prior if task.alert_cycles_prior is not None else thresholds.cycles
    return 0


def classify_status(
    numeric: float,
    unit: DueUnit,
    is_overdue: bool,
    task: MaintenanceTaskBase,
    thresholds: Optional[AlertThresholds] = None,
) -> Tuple[MaintenanceStatus, str]:
    """
    Classify a countable remaining amount.

    Overdue within tolerance (boundary inclusive) is a Grace Period.
    Not overdue but under the alert-prior is Due Soon.
    """
    thresholds = thresholds or AlertThresholds()

    if is_overdue:
        tolerance = _tolerance_for(task, unit)
        if abs(numeric) <= tolerance:
            return MaintenanceStatus.GRACE_PERIOD, f"Overdue by {abs(numeric):g} {unit.value}, within tolerance of {tolerance:g}"
        return MaintenanceStatus.OVERDUE, f"Overdue by {abs(numeric):g} {unit.value}"

    if unit == DueUnit.NONE:
        return MaintenanceStatus.NOT_APPLICABLE, "Check Due Info"

    alert_prior = _alert_prior_for(task, unit, thresholds)
    if numeric < alert_prior:
        return MaintenanceStatus.DUE_SOON, f"Due within {alert_prior:g} {unit.value}"

    return MaintenanceStatus.OK, f"{numeric:g} {unit.value} remaining"


# ============================================================
# REMAINING EVALUATION
# ============================================================

def evaluate_remaining(
    task: MaintenanceTaskBase,
    projection: DueProjection,
    component_times: Mapping[str, ComponentTime],
    default_component: str = DEFAULT_COMPONENT,
    today: Optional[date] = None,
    thresholds: Optional[AlertThresholds] = None,
) -> RemainingStatus:
    """
    Compute remaining runway to the governing due point and classify it.

    An unreadable days value means there is no due date: hours, then
    cycles, still govern. Invalid Input only when neither exists.
    """
    today = today or date.today()
    invalid_value = projection.invalid_due_value

    if projection.due_date and invalid_value is None:
        due = parse_iso_date(projection.due_date)
        if due is None:
            invalid_value = projection.due_date
        else:
            days_remaining = (due - today).days
            return _countable(days_remaining, DueUnit.DAYS, f"{days_remaining} days", task, thresholds)

    if invalid_value is not None:
        if projection.due_at_hours is None and projection.due_at_cycles is None:
            return _invalid_input(invalid_value)
        logger.warning(f"Ignoring unreadable due date value {invalid_value!r}, using hours/cycles")

    component = resolve_component_name(task, default_component)
    current = lookup_component_time(component_times, component)

    if projection.due_at_hours is not None:
        if current is None:
            status = _missing_component(component, DueUnit.HOURS)
        else:
            # + 0.0 turns -0.0 into 0.0
            hours_remaining = round_half_up(projection.due_at_hours - current.time) + 0.0
            status = _countable(hours_remaining, DueUnit.HOURS, f"{hours_remaining} hrs", task, thresholds)
            status.component = component
        return _note_invalid_date(status, invalid_value)

    if projection.due_at_cycles is not None:
        if current is None:
            status = _missing_component(component, DueUnit.CYCLES)
        else:
            cycles_remaining = int(projection.due_at_cycles - current.cycles)
            status = _countable(cycles_remaining, DueUnit.CYCLES, f"{cycles_remaining} cycles", task, thresholds)
            status.component = component
        return _note_invalid_date(status, invalid_value)

    if projection.baseline_missing:
        return RemainingStatus(
            text="Never Completed",
            numeric=math.inf,
            unit=DueUnit.NONE,
            is_overdue=False,
            status=MaintenanceStatus.NEVER_COMPLETED,
            reason="No last completed date recorded, due date unknown",
        )

    status, reason = classify_status(math.inf, DueUnit.NONE, False, task, thresholds)
    return RemainingStatus(text="N/A", numeric=math.inf, unit=DueUnit.NONE, status=status, reason=reason)


def _countable(
    numeric: float,
    unit: DueUnit,
    text: str,
    task: MaintenanceTaskBase,
    thresholds: Optional[AlertThresholds],
) -> RemainingStatus:
    is_overdue = numeric < 0
    status, reason = classify_status(numeric, unit, is_overdue, task, thresholds)
    return RemainingStatus(
        text=text,
        numeric=numeric,
        unit=unit,
        is_overdue=is_overdue,
        status=status,
        reason=reason,
    )


def _missing_component(component: str, unit: DueUnit) -> RemainingStatus:
    return RemainingStatus(
        text="Missing Component Time",
        numeric=math.inf,
        unit=unit,
        is_overdue=False,
        status=MaintenanceStatus.MISSING_COMPONENT_TIME,
        reason=f"No current time recorded for component '{component}'",
        component=component,
    )


def _note_invalid_date(status: RemainingStatus, raw_value: Optional[str]) -> RemainingStatus:
    if raw_value is not None:
        status.reason = f"{status.reason} (due date '{raw_value}' unreadable, ignored)"
    return status


def _invalid_input(raw_value: str) -> RemainingStatus:
    logger.warning(f"Unreadable due date value: {raw_value!r}")
    return RemainingStatus(
        text="Invalid Date",
        numeric=None,
        unit=DueUnit.NONE,
        is_overdue=False,
        status=MaintenanceStatus.INVALID_INPUT,
        reason=f"Due value '{raw_value}' is not a valid date or interval",
    )


# ============================================================
# TASK / AIRCRAFT LEVEL
# ============================================================

def evaluate_task(
    task,
    component_times: Mapping[str, ComponentTime],
    default_component: str = DEFAULT_COMPONENT,
    today: Optional[date] = None,
    thresholds: Optional[AlertThresholds] = None,
    fallback_to_today: bool = False,
) -> TaskDueStatus:
    """Projection + evaluation for a stored MaintenanceTask"""
    today = today or date.today()
    projection = project_due(task, today=today, fallback_to_today=fallback_to_today)
    remaining = evaluate_remaining(
        task,
        projection,
        component_times,
        default_component=default_component,
        today=today,
        thresholds=thresholds,
    )
    return TaskDueStatus(
        task_id=task.id,
        aircraft_id=task.aircraft_id,
        item_title=task.item_title,
        item_type=task.item_type,
        track_type=task.track_type,
        projection=projection,
        remaining=remaining,
    )


def is_alerting(task: MaintenanceTaskBase) -> bool:
    return task.is_active and task.track_type != TrackType.DONT_ALERT


def evaluate_tasks(
    tasks: Iterable,
    component_times: Mapping[str, ComponentTime],
    alerting_only: bool = False,
    **kwargs,
) -> List[TaskDueStatus]:
    return [
        evaluate_task(task, component_times, **kwargs)
        for task in tasks
        if not alerting_only or is_alerting(task)
    ]


def urgency_key(item: TaskDueStatus) -> Tuple[bool, float]:
    """Overdue first, then smallest remaining (most negative first)"""
    remaining = item.remaining
    numeric = remaining.numeric if remaining.numeric is not None else math.inf
    return (not remaining.is_overdue, numeric)


def rank_by_urgency(items: Iterable[TaskDueStatus]) -> List[TaskDueStatus]:
    """Sort by urgency; Invalid Input results are listed after everything else"""
    items = list(items)
    valid = [i for i in items if i.remaining.status != MaintenanceStatus.INVALID_INPUT]
    invalid = [i for i in items if i.remaining.status == MaintenanceStatus.INVALID_INPUT]
    return sorted(valid, key=urgency_key) + invalid


def most_urgent(items: Iterable[TaskDueStatus]) -> Optional[TaskDueStatus]:
    candidates = [i for i in items if i.remaining.status != MaintenanceStatus.INVALID_INPUT]
    if not candidates:
        return None
    return min(candidates, key=urgency_key)


def count_by_status(items: Iterable[TaskDueStatus]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for item in items:
        key = item.remaining.status.value
        counts[key] = counts.get(key, 0) + 1
    return counts
