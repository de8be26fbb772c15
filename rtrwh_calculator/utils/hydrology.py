import math
from typing import List, Sequence

MONSOON_MONTHS = slice(5, 9)  # June..September


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Rounds to the given number of decimals with ties going up (2.5 -> 3).

    Python's built-in round() uses banker's rounding (2.5 -> 2), which would
    shift litre totals by one on exact halves.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Half-up rounding to the nearest whole number."""
    return int(round_half_up(value))


def monthly_harvest_litres(
    roof_area_m2: float,
    monthly_rainfall_mm: Sequence[float],
    runoff_coeff: float
) -> List[int]:
    """
    Rainwater Harvesting Potential per month.

    Formula: RHP (L) = Roof Area (m²) × Rainfall (mm) × Runoff Coefficient
    (1 mm of rain on 1 m² is exactly 1 litre.)
    """
    return [
        round_int(roof_area_m2 * rainfall * runoff_coeff)
        for rainfall in monthly_rainfall_mm
    ]


def cylinder_diameter(volume_m3: float, height_m: float) -> float:
    """
    Solves V = π·r²·h for the diameter of a cylindrical tank.
    """
    return math.sqrt((volume_m3 * 4) / (math.pi * height_m))


def monsoon_share(monthly_rainfall_mm: Sequence[float], annual_rainfall_mm: float) -> float:
    """
    Fraction of the annual rainfall that falls June to September.
    """
    if annual_rainfall_mm <= 0:
        return 0.0

    monsoon_total = sum(monthly_rainfall_mm[MONSOON_MONTHS])
    return monsoon_total / annual_rainfall_mm
