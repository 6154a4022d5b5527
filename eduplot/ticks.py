from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import logging
import math

from .errors import TickGridAlignmentError, UnsupportedTickIntervalError

LOGGER = logging.getLogger(__name__)

EPSILON = 1e-12
MAX_TICKS = 10000
MAX_DECIMAL_DIGITS = 12
_RANGE_TOLERANCE = 1e-9

# (p, q) pairs for intervals of p*pi/q.
_PI_FRACTIONS: tuple[tuple[int, int], ...] = ((1, 1), (1, 2), (1, 3), (1, 4), (1, 6), (2, 1), (3, 2))


@dataclass(frozen=True)
class TickSet:
    values: tuple[float, ...] = ()
    labels: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.values)


def build_ticks(minimum: float, maximum: float, interval: float) -> TickSet:
    """Return ticks k*interval inside [minimum, maximum] with exact labels.

    Terminating decimal intervals use integer arithmetic at a power-of-ten
    scale. Intervals that are multiples of 1/3 or 1/6 are labeled as reduced
    fractions, and common multiples of pi get symbolic labels. Any other
    interval raises UnsupportedTickIntervalError.
    """

    if not (math.isfinite(minimum) and math.isfinite(maximum) and math.isfinite(interval)):
        LOGGER.error("non-finite tick parameters: min=%s max=%s interval=%s", minimum, maximum, interval)
        return TickSet()
    if minimum > maximum or interval <= 0:
        LOGGER.error("invalid tick parameters: min=%s max=%s interval=%s", minimum, maximum, interval)
        return TickSet()

    if is_finite_decimal(interval):
        return _capped(_decimal_ticks(minimum, maximum, interval))

    base = 0
    if _is_multiple_of(interval, 6):
        base = 6
    elif _is_multiple_of(interval, 3):
        base = 3
    if base:
        return _capped(_rational_ticks(minimum, maximum, interval, base))

    pi_fraction = _match_pi_fraction(interval)
    if pi_fraction is not None:
        return _capped(_pi_ticks(minimum, maximum, interval, *pi_fraction))

    LOGGER.error("unsupported tick interval %r", interval)
    raise UnsupportedTickIntervalError(interval)


def is_finite_decimal(value: float, max_digits: int = MAX_DECIMAL_DIGITS) -> bool:
    scaled = value
    for _ in range(max_digits):
        if abs(scaled - round(scaled)) < EPSILON:
            return True
        scaled *= 10
    return abs(scaled - round(scaled)) < EPSILON


def decimal_places(value: float) -> int:
    try:
        exponent = Decimal(repr(float(value))).normalize().as_tuple().exponent
    except InvalidOperation:
        return 0
    if not isinstance(exponent, int):
        return 0
    return max(0, -exponent)


def _capped(ticks: TickSet) -> TickSet:
    if len(ticks) >= MAX_TICKS:
        LOGGER.warning("tick output truncated at %d values", MAX_TICKS)
    return ticks


def _decimal_ticks(minimum: float, maximum: float, interval: float) -> TickSet:
    digits = max(decimal_places(minimum), decimal_places(maximum), decimal_places(interval))
    scale = 10**digits
    min_i = round(minimum * scale)
    max_i = round(maximum * scale)
    step_i = round(interval * scale)
    if step_i <= 0:
        return TickSet()

    values: list[float] = []
    labels: list[str] = []
    current = _ceil_div(min_i, step_i) * step_i
    while current <= max_i and len(values) < MAX_TICKS:
        values.append(current / scale)
        labels.append(_format_scaled_int(current, scale, digits))
        current += step_i
    return TickSet(values=tuple(values), labels=tuple(labels))


def _rational_ticks(minimum: float, maximum: float, interval: float, base: int) -> TickSet:
    denominator = base * 10 ** max(decimal_places(minimum), decimal_places(maximum))
    min_i = _to_grid_int(minimum, denominator)
    max_i = _to_grid_int(maximum, denominator)
    step_i = _to_grid_int(interval, denominator)
    if step_i <= 0:
        return TickSet()

    values: list[float] = []
    labels: list[str] = []
    current = _ceil_div(min_i, step_i) * step_i
    while current <= max_i and len(values) < MAX_TICKS:
        values.append(current / denominator)
        labels.append(_format_rational(current, denominator))
        current += step_i
    return TickSet(values=tuple(values), labels=tuple(labels))


def _pi_ticks(minimum: float, maximum: float, interval: float, p: int, q: int) -> TickSet:
    start_k = math.ceil(minimum / interval - EPSILON)
    end_k = math.floor(maximum / interval + EPSILON)
    values: list[float] = []
    labels: list[str] = []
    for k in range(start_k, end_k + 1):
        if len(values) >= MAX_TICKS:
            break
        value = k * interval
        if value < minimum - _RANGE_TOLERANCE or value > maximum + _RANGE_TOLERANCE:
            continue
        values.append(value)
        labels.append(format_pi_label(k * p, q))
    return TickSet(values=tuple(values), labels=tuple(labels))


def format_pi_label(numerator: int, denominator: int) -> str:
    """Label numerator*pi/denominator in lowest terms ("π", "-π", "π/2", "3π/2")."""

    if numerator == 0:
        return "0"
    g = math.gcd(abs(numerator), denominator)
    num = numerator // g
    den = denominator // g
    sign = "-" if num < 0 else ""
    coeff = "" if abs(num) == 1 else str(abs(num))
    if den == 1:
        return f"{sign}{coeff}π"
    return f"{sign}{coeff}π/{den}"


def _is_multiple_of(interval: float, base: int) -> bool:
    scaled = interval * base
    return abs(scaled - round(scaled)) < EPSILON


def _match_pi_fraction(interval: float) -> tuple[int, int] | None:
    for p, q in _PI_FRACTIONS:
        if abs(interval - math.pi * p / q) < EPSILON:
            return p, q
    return None


def _to_grid_int(value: float, denominator: int) -> int:
    scaled = value * denominator
    rounded = round(scaled)
    if abs(scaled - rounded) > 1e-9:
        raise TickGridAlignmentError(value, denominator)
    return int(rounded)


def _ceil_div(a: int, b: int) -> int:
    return -((-a) // b)


def _strip_twos_and_fives(n: int) -> int:
    for factor in (2, 5):
        while n % factor == 0:
            n //= factor
    return n


def _format_rational(numerator: int, denominator: int) -> str:
    g = math.gcd(abs(numerator), denominator)
    num = numerator // g
    den = denominator // g
    if _strip_twos_and_fives(den) != 1:
        return f"{num}/{den}"
    # den only has factors 2 and 5, so the decimal expansion terminates.
    digits = 0
    while 10**digits % den:
        digits += 1
    return _format_scaled_int(num * (10**digits // den), 10**digits, digits)


def _format_scaled_int(value: int, scale: int, digits: int) -> str:
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), scale)
    if digits == 0 or frac == 0:
        return f"{sign}{whole}" if whole else "0"
    frac_text = str(frac).rjust(digits, "0").rstrip("0")
    return f"{sign}{whole}.{frac_text}"
