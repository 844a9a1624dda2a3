from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import numpy as np


@dataclass(frozen=True)
class ValueLimits:
    vmin: float
    vmax: float

    @property
    def span(self) -> float:
        return self.vmax - self.vmin


def value_limits(values: Sequence[float] | np.ndarray) -> ValueLimits | None:
    arr = np.asarray(values, dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    vmin = float(np.min(arr))
    vmax = float(np.max(arr))
    if vmin == vmax:
        delta = max(1.0, abs(vmin) * 0.05)
        vmin -= delta
        vmax += delta
    return ValueLimits(vmin=vmin, vmax=vmax)


def linear_map(limits: ValueLimits, device_range: tuple[float, float], value: float) -> float:
    d0, d1 = device_range
    span = limits.span if limits.span != 0 else 1.0
    return d0 + (value - limits.vmin) / span * (d1 - d0)


def linear_unmap(limits: ValueLimits, device_range: tuple[float, float], device: float) -> float:
    d0, d1 = device_range
    if d1 == d0:
        return limits.vmin
    return limits.vmin + (device - d0) / (d1 - d0) * limits.span


def nice_step(vmin: float, vmax: float, target: int) -> float:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmax <= vmin:
        return 1.0
    span = _nice_number(vmax - vmin, round_result=False)
    return _nice_number(span / max(target - 1, 1), round_result=True)


def generate_nice_ticks(vmin: float, vmax: float, target: int, preferred_step: float | None = None) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    step = nice_step(vmin, vmax, target)
    if preferred_step is not None and np.isfinite(preferred_step) and preferred_step > 0:
        est_ticks = int(np.ceil((vmax - vmin) / preferred_step)) + 1
        if preferred_step < step and est_ticks <= max(target * 2, 12):
            step = preferred_step
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def minor_ticks(major: np.ndarray, divisions: int = 5) -> np.ndarray:
    if major.size < 2 or divisions <= 1:
        return np.asarray([], dtype=np.float64)
    step = float(major[1] - major[0]) / divisions
    minor = np.arange(float(major[0]), float(major[-1]) + 0.5 * step, step, dtype=np.float64)
    keep = ~np.any(np.isclose(minor[:, None], major[None, :], rtol=0.0, atol=abs(step) * 1e-6), axis=1)
    return minor[keep]


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
