"""
Component Times Service

Read/write of per-aircraft component times and the accumulation rule
applied when a flight log leg is recorded.

ACCUMULATION (per leg):
- "Airframe", "Engine*", "Propeller*" -> + flight time, + 1 cycle
- "APU"                             -> + APU run time only
- anything else                     -> entry created, left unchanged
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from models.aircraft import DEFAULT_TRACKED_COMPONENTS
from models.component_times import ComponentTime
from models.flight_log import FlightLogLegData

logger = logging.getLogger(__name__)

LEG_CYCLES = 1


# ============================================================
# STORE
# ============================================================

async def fetch_component_times(db: AsyncIOMotorDatabase, aircraft_id: str) -> Dict[str, ComponentTime]:
    """Current component times for an aircraft (empty map if never recorded)"""
    doc = await db.aircraft_component_times.find_one({"_id": aircraft_id})
    if not doc:
        logger.info(f"No component times recorded for aircraft {aircraft_id}")
        return {}

    times = {}
    for name, values in (doc.get("component_times") or {}).items():
        times[name] = ComponentTime(**(values or {}))
    return times


async def save_component_times(
    db: AsyncIOMotorDatabase,
    aircraft_id: str,
    component_times: Dict[str, ComponentTime]
) -> None:
    now = datetime.utcnow()
    await db.aircraft_component_times.update_one(
        {"_id": aircraft_id},
        {
            "$set": {
                "component_times": {name: ct.model_dump() for name, ct in component_times.items()},
                "updated_at": now
            },
            "$setOnInsert": {"created_at": now}
        },
        upsert=True
    )
    logger.info(f"Saved component times for aircraft {aircraft_id}: {sorted(component_times)}")


# ============================================================
# ACCUMULATION
# ============================================================

def _accumulates_flight_time(name: str) -> bool:
    key = name.strip().lower()
    return key == "airframe" or key.startswith("engine") or key.startswith("propeller")


def apply_leg_usage(
    component_times: Dict[str, ComponentTime],
    tracked_components: Optional[Iterable[str]],
    flight_hours: float,
    apu_hours: float = 0.0,
    sign: int = 1
) -> Dict[str, ComponentTime]:
    """
    Return a new component-time map with one leg added (sign=1) or
    removed (sign=-1). The input map is not modified.
    Removal never takes a value below zero.
    """
    updated = {name: ct.model_copy() for name, ct in component_times.items()}

    for raw_name in (tracked_components or DEFAULT_TRACKED_COMPONENTS):
        name = raw_name.strip()
        if not name:
            continue
        current = updated.get(name) or ComponentTime()

        if _accumulates_flight_time(name):
            current = ComponentTime(
                time=max(round(current.time + sign * flight_hours, 2), 0.0),
                cycles=max(current.cycles + sign * LEG_CYCLES, 0)
            )
        elif name.lower() == "apu" and apu_hours > 0:
            current = ComponentTime(
                time=max(round(current.time + sign * apu_hours, 2), 0.0),
                cycles=current.cycles
            )

        updated[name] = current

    return updated


def flight_duration_hours(leg: FlightLogLegData) -> float:
    """
    Flight time of a leg in decimal hours.
    Hobbs difference when usable, else take-off/landing clock times
    (landing earlier than take-off means the leg crossed midnight).
    """
    if leg.hobbs_landing is not None and leg.hobbs_take_off is not None \
            and leg.hobbs_landing > leg.hobbs_take_off:
        return round(leg.hobbs_landing - leg.hobbs_take_off, 2)

    if leg.take_off_time and leg.landing_time:
        try:
            take_off = datetime.strptime(leg.take_off_time, "%H:%M")
            landing = datetime.strptime(leg.landing_time, "%H:%M")
        except ValueError:
            logger.warning(f"Unparseable leg times {leg.take_off_time!r} / {leg.landing_time!r}")
            return 0.0
        if landing < take_off:
            landing += timedelta(days=1)
        return round((landing - take_off).total_seconds() / 3600, 2)

    return 0.0
