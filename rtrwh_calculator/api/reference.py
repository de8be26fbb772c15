from fastapi import APIRouter, Depends, HTTPException
from typing import List

from rtrwh_calculator.models.reference import CityData, Coefficients
from rtrwh_calculator.services.reference_data import ReferenceData, get_reference_data

router = APIRouter(prefix="/api/v1", tags=["Reference Data"])


@router.get("/cities", response_model=List[CityData])
def list_cities(reference: ReferenceData = Depends(get_reference_data)):
    """
    The static city climate table used for location matching.
    """
    return list(reference.cities)


@router.get("/cities/{name}", response_model=CityData)
def get_city(name: str, reference: ReferenceData = Depends(get_reference_data)):
    city = reference.find_city_by_name(name)
    if city is None:
        raise HTTPException(status_code=404, detail=f"City '{name}' not found")
    return city


@router.get("/coefficients", response_model=Coefficients)
def get_coefficients(reference: ReferenceData = Depends(get_reference_data)):
    """Runoff, infiltration, cost and water-rate constants."""
    return reference.coefficients
