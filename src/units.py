"""
Derived physical quantities computed from raw form inputs.

Form fields arrive as strings. Anything that does not parse to a finite
number is treated as "missing", never as an error.
"""

import math

REYNOLDS_NOT_CALCULATED = "Not calculated (missing inputs)."


def parse_number(text: str | None) -> float | None:
    """Parse a form value as a finite float, or return None."""
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def reynolds_number(
    density: str | None,
    velocity: str | None,
    length: str | None,
    viscosity: str | None,
) -> float | None:
    """
    Compute Re = rho * V * L / mu from form strings.

    Args:
        density: Fluid density in kg/m^3.
        velocity: Characteristic velocity in m/s.
        length: Characteristic length in m.
        viscosity: Dynamic viscosity in Pa.s.

    Returns:
        The Reynolds number, or None if any input is unparseable, mu == 0,
        or the result is not finite.
    """
    rho = parse_number(density)
    v = parse_number(velocity)
    l = parse_number(length)
    mu = parse_number(viscosity)

    if rho is None or v is None or l is None or mu is None or mu == 0:
        return None

    re = rho * v * l / mu
    # Overflow (huge inputs, subnormal mu) is not a usable value
    if not math.isfinite(re):
        return None
    return re


def format_scientific(value: float, digits: int = 2) -> str:
    """Format like 1.23e+5: fixed mantissa digits, unpadded signed exponent."""
    mantissa, exponent = f"{value:.{digits}e}".split("e")
    return f"{mantissa}e{int(exponent):+d}"


def format_reynolds_number(
    density: str | None,
    velocity: str | None,
    length: str | None,
    viscosity: str | None,
) -> str:
    """Reynolds number as prompt text, e.g. "~9.96e+5", or the not-calculated marker."""
    re_value = reynolds_number(density, velocity, length, viscosity)
    if re_value is None:
        return REYNOLDS_NOT_CALCULATED
    return f"~{format_scientific(re_value)}"
