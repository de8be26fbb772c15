from pydantic import BaseModel, Field
from typing import Optional, Literal

RoofType = Literal['RCC', 'GI', 'Asbestos', 'Tiles']
Environment = Literal['Residential', 'Industrial', 'Agricultural']
Purpose = Literal['Domestic', 'Irrigation', 'Industrial']
SoilType = Literal['Sandy', 'Loamy', 'Clayey']
BudgetTier = Literal['Low', 'Medium', 'High']
CalculationType = Literal['rainwater', 'recharge']


class UserInput(BaseModel):
    """
    Building and location parameters submitted by a user.
    Validated here so the engine never sees out-of-range values.
    """
    name: str = Field(..., min_length=2, description="Name of the applicant")
    location: str = Field(..., min_length=2, description="City or locality (free text)")
    pincode: str = Field(..., pattern=r"^\d{6}$", description="6-digit Indian postal code")
    roof_area: float = Field(..., gt=0, description="Catchment roof area in m²")
    roof_type: RoofType
    environment: Environment
    bird_nesting: bool = Field(default=False, description="Birds nest on or near the roof")
    dwellers: int = Field(..., ge=1, description="Number of people in the household")
    purpose: Purpose
    has_open_space: bool = Field(default=False)
    open_space_area: Optional[float] = Field(default=None, ge=0, description="Open space in m²")
    groundwater_depth: float = Field(..., ge=0, description="Depth to groundwater in meters")
    soil_type: SoilType
    budget: BudgetTier

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "Asha Verma",
                "location": "Delhi",
                "pincode": "110001",
                "roof_area": 120.0,
                "roof_type": "RCC",
                "environment": "Residential",
                "bird_nesting": False,
                "dwellers": 4,
                "purpose": "Domestic",
                "has_open_space": True,
                "open_space_area": 25.0,
                "groundwater_depth": 15.0,
                "soil_type": "Loamy",
                "budget": "Medium"
            }
        }
