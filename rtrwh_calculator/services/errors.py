class CalculatorError(Exception):
    """Base class for calculator failures."""


class CityNotFoundError(CalculatorError):
    """No city record could be resolved (the city table is empty)."""

    def __init__(self, location: str, pincode: str):
        self.location = location
        self.pincode = pincode
        super().__init__(f"City data not found for {location}, {pincode}")


class ReferenceDataError(CalculatorError):
    """A static reference table is missing or malformed."""
