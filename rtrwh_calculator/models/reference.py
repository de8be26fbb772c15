from pydantic import BaseModel, Field, model_validator
from typing import Dict, List, Literal, get_args

from rtrwh_calculator.models.user_input import RoofType, SoilType, BudgetTier


class CityData(BaseModel):
    """
    Climate and hydrogeology normals for one city (static table row).
    """
    city: str
    state: str
    pincode: str = Field(..., description="Representative pincode; its first 3 digits identify the district")
    monthly_rainfall: List[float] = Field(..., min_length=12, max_length=12, description="Jan..Dec normals in mm")
    annual_rainfall: float = Field(..., ge=0, description="Annual normal in mm")
    groundwater_depth: float = Field(..., ge=0, description="Typical depth to water table in meters")
    aquifer_type: Literal['Alluvial', 'Hard Rock', 'Coastal', 'Desert']
    region: Literal['North', 'South', 'East', 'West', 'Central', 'Northeast']

    class Config:
        frozen = True


class CostFactors(BaseModel):
    base_cost_per_sqm: float = Field(..., ge=0, description="Rupees per m² of catchment")
    budget_multipliers: Dict[BudgetTier, float]

    class Config:
        frozen = True


class WaterRates(BaseModel):
    municipal_rate: float = Field(..., ge=0, description="Rupees per litre of supplied water")
    domestic_consumption: float = Field(..., gt=0, description="Litres per person per day")

    class Config:
        frozen = True


class Coefficients(BaseModel):
    """
    Material, soil and economic constants shared by every calculation.
    """
    runoff_coefficients: Dict[RoofType, float]
    infiltration_rates: Dict[SoilType, float]  # mm/hr
    cost_factors: CostFactors
    water_rates: WaterRates

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_complete_tables(self):
        # Every enum member must have a value; the engine indexes these directly
        tables = [
            ("runoff_coefficients", self.runoff_coefficients, get_args(RoofType)),
            ("infiltration_rates", self.infiltration_rates, get_args(SoilType)),
            ("budget_multipliers", self.cost_factors.budget_multipliers, get_args(BudgetTier)),
        ]
        for table_name, table, required in tables:
            missing = [key for key in required if key not in table]
            if missing:
                raise ValueError(f"{table_name} is missing entries for: {', '.join(missing)}")
        return self
