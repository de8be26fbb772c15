import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from pydantic import ValidationError

from rtrwh_calculator.config.settings import CITIES_FILE, COEFFICIENTS_FILE
from rtrwh_calculator.models.reference import CityData, Coefficients
from rtrwh_calculator.services.errors import ReferenceDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceData:
    """
    The static lookup tables, loaded once and shared read-only by every
    calculation.
    """
    cities: Tuple[CityData, ...]
    coefficients: Coefficients

    def find_city_by_name(self, name: str) -> Optional[CityData]:
        name_lower = name.strip().lower()
        for city in self.cities:
            if city.city.lower() == name_lower:
                return city
        return None


def _read_json(path: Path):
    try:
        with open(path, mode='r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        raise ReferenceDataError(f"Reference file not found: {path}")
    except json.JSONDecodeError as e:
        raise ReferenceDataError(f"Reference file {path} is not valid JSON: {e}")


def load_cities(path: Path) -> Tuple[CityData, ...]:
    """
    Loads and validates the city climate table.

    Args:
        path: JSON file holding a list of city records.

    Returns:
        Tuple of CityData in file order (order matters for city resolution).
    """
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise ReferenceDataError(f"{path} must contain a list of city records")

    try:
        cities = tuple(CityData.model_validate(row) for row in raw)
    except ValidationError as e:
        raise ReferenceDataError(f"Invalid city record in {path}: {e}")

    logger.info(f"🏙️ Loaded {len(cities)} city records from {path.name}")
    return cities


def load_coefficients(path: Path) -> Coefficients:
    """Loads and validates the coefficient table."""
    raw = _read_json(path)
    try:
        coefficients = Coefficients.model_validate(raw)
    except ValidationError as e:
        raise ReferenceDataError(f"Invalid coefficients in {path}: {e}")

    logger.info(f"📐 Loaded coefficients from {path.name}")
    return coefficients


@lru_cache(maxsize=1)
def get_reference_data() -> ReferenceData:
    """
    Returns the process-wide reference tables, reading the files on first use.
    """
    return ReferenceData(
        cities=load_cities(CITIES_FILE),
        coefficients=load_coefficients(COEFFICIENTS_FILE)
    )
