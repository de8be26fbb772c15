from pydantic import BaseModel, Field, model_serializer
from typing import List, Literal, Optional


class TankDimensions(BaseModel):
    diameter: float  # m
    height: float  # m

    class Config:
        frozen = True


class PitDimensions(BaseModel):
    length: float  # m
    width: float  # m
    depth: float  # m

    class Config:
        frozen = True


class SystemCost(BaseModel):
    low: int
    medium: int
    high: int

    class Config:
        frozen = True


class CalculationResults(BaseModel):
    """
    Everything derived for one calculation request.

    recharge_volume and pit_dimensions are only populated for 'recharge'
    calculations; they are left out of the serialized output otherwise.
    """
    # Rainwater harvesting
    rainwater_potential: int = Field(..., description="Litres per year")
    monthly_potential: List[int] = Field(..., min_length=12, max_length=12, description="Litres per month, Jan..Dec")
    household_demand: int = Field(..., description="Litres per year")
    coverage_percentage: int = Field(..., ge=0, le=100)
    first_flush: int = Field(..., description="Litres diverted per rain event")

    # Storage
    tank_capacity: int = Field(..., description="Litres")
    tank_dimensions: TankDimensions

    # Artificial recharge
    recharge_volume: Optional[int] = Field(default=None, description="m³ per year")
    pit_dimensions: Optional[PitDimensions] = None

    # Economics
    system_cost: SystemCost
    annual_savings: int = Field(..., description="Rupees per year")
    payback_period: int = Field(..., ge=0, le=20, description="Years")

    # Feasibility
    feasibility_score: int = Field(..., ge=0, le=100)
    feasibility_level: Literal['High', 'Medium', 'Low']
    recommendations: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @model_serializer(mode="wrap")
    def drop_absent_recharge_fields(self, handler):
        data = handler(self)
        for key in ("recharge_volume", "pit_dimensions"):
            if data.get(key) is None:
                data.pop(key, None)
        return data
