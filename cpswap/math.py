"""Checked 128-bit helpers used by the curve calculations."""

from __future__ import annotations

U128_MAX = (1 << 128) - 1


def _check_u128(name: str, value: int) -> None:
    if not 0 <= value <= U128_MAX:
        raise ValueError(f"{name} must fit in an unsigned 128-bit integer, got {value}")


def checked_ceil_div(dividend: int, divisor: int) -> tuple[int, int] | None:
    """Ceiling-divide two u128 values.

    Returns ``(quotient, adjusted_divisor)``: the rounded-up quotient and the
    smallest divisor that still yields it, so that the caller does not truncate
    more than necessary. When the quotient would be zero the result is
    ``(1, 0)`` if the dividend is at least half the divisor, otherwise
    ``(0, 0)``. Returns ``None`` on division by zero or overflow.
    """
    _check_u128("dividend", dividend)
    _check_u128("divisor", divisor)
    if divisor == 0:
        return None

    quotient, remainder = divmod(dividend, divisor)
    if quotient == 0:
        doubled = dividend * 2
        if doubled > U128_MAX:
            return None
        return (1, 0) if doubled >= divisor else (0, 0)

    if remainder > 0:
        quotient += 1
        if quotient > U128_MAX:
            return None
        divisor, rest = divmod(dividend, quotient)
        if rest > 0:
            divisor += 1
            if divisor > U128_MAX:
                return None
    return quotient, divisor