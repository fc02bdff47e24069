"""
Shared utility functions for equipment transfer functions.

The humidifier solvers search for an outlet temperature that zeroes an
energy or humidity objective. They bracket a root and use brentq, falling
back to the damped fixed-point iteration when no bracket exists. An estimate
that does not converge is discarded so the caller holds its previous state.
"""

import logging
import math
from typing import Callable, Optional

from scipy.optimize import brentq

from actrain.config import (
    MOIST_AIR_SPECIFIC_HEAT,
    SOLVER_DAMPING,
    SOLVER_SCAN_STEP,
    SOLVER_T_MAX,
    SOLVER_T_MIN,
    WATER_SPECIFIC_HEAT,
)
from actrain.engine.air_state import derive_air_state
from actrain.models.air import AirState

logger = logging.getLogger(__name__)


def volumetric_airflow(mass_flow: float, density: Optional[float]) -> float:
    """Volumetric airflow (m³/min) from dry-air mass flow (kg/s) and density."""
    if not density:
        return 0.0
    return mass_flow / density * 60.0


def water_flow_l_min(heat_load_kw: float, water_delta_t: float) -> float:
    """Water flow (L/min) carrying a heat load across a water-side ΔT."""
    if water_delta_t <= 0:
        return 0.0
    return max(0.0, heat_load_kw / (WATER_SPECIFIC_HEAT * water_delta_t) * 60.0)


def water_side_load(air_side_kw: float, efficiency_pct: float) -> float:
    """Water-side heat load (kW) given the heat-exchange efficiency (%)."""
    if efficiency_pct <= 0:
        return 0.0
    return air_side_kw / (efficiency_pct / 100.0)


def sensible_temp_change(heat_kw: float, mass_flow: float) -> float:
    """Temperature change (K) of the air stream from a sensible heat input."""
    if mass_flow <= 0:
        return 0.0
    return heat_kw / (mass_flow * MOIST_AIR_SPECIFIC_HEAT)


def damped_fixed_point(
    objective: Callable[[float], float],
    T_start: float,
    increasing: bool,
    tolerance: float,
    max_iter: int,
) -> tuple[float, bool]:
    """
    Error-proportional temperature iteration.

    Moves T against the objective's sign by SOLVER_DAMPING × error each step.
    Returns (T, converged).
    """
    sign = 1.0 if increasing else -1.0
    T = T_start
    for _ in range(max_iter):
        error = objective(T)
        if not math.isfinite(error):
            return T, False
        if abs(error) < tolerance:
            return T, True
        T -= sign * SOLVER_DAMPING * error
    return T, abs(objective(T)) < tolerance


def _sign_changes(
    objective: Callable[[float], float],
    T_min: float,
    T_max: float,
) -> list[tuple[float, float]]:
    """Grid intervals of [T_min, T_max] over which the objective changes sign."""
    steps = max(1, math.ceil((T_max - T_min) / SOLVER_SCAN_STEP))
    grid = [T_min + (T_max - T_min) * i / steps for i in range(steps + 1)]
    values = [objective(T) for T in grid]

    brackets = []
    for a, b, fa, fb in zip(grid, grid[1:], values, values[1:]):
        if math.isfinite(fa) and math.isfinite(fb) and fa * fb <= 0:
            brackets.append((a, b))
    return brackets


def _distance(bracket: tuple[float, float], T: float) -> float:
    a, b = bracket
    if a <= T <= b:
        return 0.0
    return min(abs(a - T), abs(b - T))


def solve_outlet_temperature(
    objective: Callable[[float], float],
    T_start: float,
    increasing: bool,
    tolerance: float,
    max_iter: int,
    label: str,
    T_max: float = SOLVER_T_MAX,
) -> tuple[Optional[float], bool]:
    """
    Find the temperature where the objective crosses zero.

    The objective need not be monotonic over the whole range, so the range is
    scanned for sign changes and brentq runs on each bracket, nearest to
    T_start first. A bracket whose root misses the tolerance (a jump rather
    than a crossing) is skipped. Without a usable bracket the damped
    fixed-point iteration runs from T_start.

    Returns (T, converged). T is None when no converged estimate inside
    [SOLVER_T_MIN, T_max] exists; callers then hold the previous state.
    """
    T_min = SOLVER_T_MIN

    brackets = _sign_changes(objective, T_min, T_max)
    brackets.sort(key=lambda ab: _distance(ab, T_start))
    for a, b in brackets:
        T = brentq(objective, a, b, xtol=1e-9)
        if abs(objective(T)) < tolerance:
            return T, True

    T, converged = damped_fixed_point(objective, T_start, increasing, tolerance, max_iter)
    if converged and math.isfinite(T) and T_min <= T <= T_max:
        return T, True

    logger.warning(
        "%s solver did not converge after %d iterations (T=%.4f)",
        label, max_iter, T,
    )
    return None, False


def hold_previous(previous: AirState, inlet: AirState, pressure: float) -> AirState:
    """Fallback outlet: keep the previous temperature/humidity, else the inlet."""
    source = previous if previous.is_known else inlet
    return derive_air_state(
        source.temperature,
        absolute_humidity_override=source.absolute_humidity,
        pressure=pressure,
    )
