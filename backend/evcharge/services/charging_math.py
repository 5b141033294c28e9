"""
Charging math - pure helpers for time-based session derivation.

Linear model: energy = power (kW) x time (h) x efficiency, battery level grows
by energy / capacity, cost = energy x price per kWh. No state of its own.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

DEFAULT_EFFICIENCY = 0.9
DEFAULT_BATTERY_CAPACITY_KWH = 60.0
DEFAULT_PRICE_PER_KWH = 165.0  # Naira
POWER_TOLERANCE_RATIO = 1.2


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def elapsed_minutes(start: datetime, end: Optional[datetime] = None) -> int:
    """Whole minutes between start and end (now by default), never negative."""
    end = end or utcnow()
    return max(0, math.floor((end - start).total_seconds() / 60))


def energy_from_power(power_kw: float, hours: float, efficiency: float = DEFAULT_EFFICIENCY) -> float:
    """Energy in kWh delivered at power_kw over hours."""
    if power_kw <= 0 or hours <= 0:
        return 0.0
    return power_kw * hours * efficiency


def battery_level_for_energy(
    battery_level_start: float,
    energy_kwh: float,
    battery_capacity_kwh: float = DEFAULT_BATTERY_CAPACITY_KWH,
) -> float:
    """Battery percentage after adding energy_kwh, capped at 100."""
    return min(100.0, battery_level_start + (energy_kwh / battery_capacity_kwh) * 100)


def energy_from_battery_change(
    battery_level_start: float,
    battery_level_end: float,
    battery_capacity_kwh: float = DEFAULT_BATTERY_CAPACITY_KWH,
) -> float:
    """Rough energy estimate from a battery percentage change, floored at 0."""
    return max(0.0, (battery_level_end - battery_level_start) / 100 * battery_capacity_kwh)


def cost_for_energy(energy_kwh: float, price_per_kwh: float) -> float:
    return energy_kwh * price_per_kwh


def average_power(energy_kwh: float, duration_minutes: float) -> float:
    """Average kW over the duration; 0 for a zero-length session."""
    if duration_minutes <= 0:
        return 0.0
    return energy_kwh / (duration_minutes / 60)


def estimate_charging_time_minutes(
    power_output_kw: float,
    energy_needed_kwh: float,
    efficiency: float = DEFAULT_EFFICIENCY,
) -> int:
    """
    Estimated minutes to deliver energy_needed_kwh at power_output_kw.

    Losses are accounted for by dividing by efficiency; rounded up to the
    next whole minute.
    """
    if power_output_kw <= 0 or energy_needed_kwh <= 0:
        return 0
    time_hours = (energy_needed_kwh / efficiency) / power_output_kw
    return math.ceil(time_hours * 60)


@dataclass(frozen=True)
class RealTimeValues:
    energy_delivered: float
    average_power: float
    total_cost: float
    battery_level: float
    duration: int


def real_time_values(
    session: Any,
    price_per_kwh: float,
    now: Optional[datetime] = None,
    battery_capacity_kwh: float = DEFAULT_BATTERY_CAPACITY_KWH,
    efficiency: float = DEFAULT_EFFICIENCY,
) -> RealTimeValues:
    """
    Project an active session's values to `now` from elapsed wall-clock time.

    Uses the snapshotted rated power, falling back to the last known average
    power. Projected energy and battery level never fall below the stored
    values. With no usable power or no elapsed time the stored values are
    returned unchanged.
    """
    duration = elapsed_minutes(session.start_time, now)
    duration_hours = duration / 60
    power_kw = session.station_power_output or session.average_power or 0
    stored_energy = session.energy_delivered or 0.0
    stored_battery = session.battery_level or session.battery_level_start

    if power_kw <= 0 or duration <= 0:
        return RealTimeValues(
            energy_delivered=stored_energy,
            average_power=session.average_power or 0.0,
            total_cost=session.total_cost or 0.0,
            battery_level=stored_battery,
            duration=duration,
        )

    # Stored values are a floor; only the projection is rounded
    energy = max(round(energy_from_power(power_kw, duration_hours, efficiency), 2), stored_energy)
    battery = max(
        round(battery_level_for_energy(session.battery_level_start, energy, battery_capacity_kwh), 1),
        stored_battery,
    )

    return RealTimeValues(
        energy_delivered=energy,
        average_power=round(average_power(energy, duration), 2),
        total_cost=round(cost_for_energy(energy, price_per_kwh), 2),
        battery_level=battery,
        duration=duration,
    )
