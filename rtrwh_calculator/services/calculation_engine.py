import logging
import math
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from rtrwh_calculator.models.reference import CityData, Coefficients
from rtrwh_calculator.models.results import (
    CalculationResults, PitDimensions, SystemCost, TankDimensions
)
from rtrwh_calculator.models.user_input import CalculationType, UserInput
from rtrwh_calculator.services.errors import CityNotFoundError
from rtrwh_calculator.services.reference_data import ReferenceData, get_reference_data
from rtrwh_calculator.utils.hydrology import (
    cylinder_diameter, monsoon_share, monthly_harvest_litres, round_half_up, round_int
)

logger = logging.getLogger(__name__)

FALLBACK_CITY = "Delhi"

# Demand
DAYS_PER_YEAR = 365
PURPOSE_FACTORS = {"Domestic": 1.0, "Irrigation": 1.5, "Industrial": 2.0}

# Storage tank
TANK_DEMAND_DAYS = 35
TANK_POTENTIAL_SHARE = 0.2
TANK_MAX_LITRES = 15000
TANK_MIN_LITRES = 2000
TANK_HEIGHT_M = 2.0

# First flush: 2 mm of rain over the roof
FIRST_FLUSH_MM = 2

# Recharge pit
RECHARGE_FACTORS = {"Clayey": 0.7, "Loamy": 0.8, "Sandy": 0.9}
RAINY_DAYS_PER_YEAR = 120
INFILTRATION_HOURS_PER_DAY = 8
PIT_MIN_AREA_M2 = 9
PIT_STORAGE_MARGIN = 1.2
PIT_MIN_SIDE_M = 3
PIT_DEPTH_FACTOR = 0.3
PIT_MIN_DEPTH_M = 2
PIT_MAX_DEPTH_M = 4

# Costs (rupees)
TANK_COST_PER_LITRE = 0.8
RECHARGE_COST_PER_SQM = 150
REFILLS_PER_YEAR = 10
MAX_PAYBACK_YEARS = 20

# Feasibility
BASE_SCORE = 50
MONSOON_DEPENDENCY_SHARE = 0.7


def resolve_city(cities: Sequence[CityData], location: str, pincode: str) -> Optional[CityData]:
    """
    Picks the closest matching city record.

    Order of preference:
    1. Pincode district prefix (first 3 digits).
    2. Case-insensitive name match between location and city/state.
    3. The fallback city, then the first table entry.

    Returns None only when the table is empty.
    """
    prefix = pincode[:3]
    for city in cities:
        if city.pincode.startswith(prefix):
            return city

    location_lower = location.lower()
    for city in cities:
        city_lower = city.city.lower()
        if (
            location_lower in city_lower
            or city_lower in location_lower
            or location_lower in city.state.lower()
        ):
            return city

    for city in cities:
        if city.city == FALLBACK_CITY:
            return city

    return cities[0] if cities else None


class CalculationEngine:
    """
    Scientific Rainwater Harvesting Calculation Engine.
    Based on CGWB (Central Ground Water Board) guidelines.

    Stateless apart from the read-only reference tables, so one instance can
    serve every request.
    """

    def __init__(self, reference: ReferenceData):
        self.cities = reference.cities
        self.coefficients: Coefficients = reference.coefficients

    # --- Stages ---

    def rainwater_potential(self, user_input: UserInput, city: CityData) -> Tuple[int, List[int]]:
        """Returns (annual litres, monthly litres)."""
        runoff = self.coefficients.runoff_coefficients[user_input.roof_type]
        monthly = monthly_harvest_litres(user_input.roof_area, city.monthly_rainfall, runoff)
        return sum(monthly), monthly

    def household_demand(self, user_input: UserInput) -> int:
        """
        Formula: Demand = People × Daily consumption × 365 × Purpose factor
        """
        daily = self.coefficients.water_rates.domestic_consumption
        factor = PURPOSE_FACTORS[user_input.purpose]
        return round_int(user_input.dwellers * daily * DAYS_PER_YEAR * factor)

    def storage_tank(self, rainwater_potential: int, household_demand: int) -> Tuple[int, TankDimensions]:
        """
        Tank holds ~35 days of demand or 20% of the annual harvest,
        whichever is smaller, within 2,000-15,000 L.
        """
        demand_based = round_int(household_demand / DAYS_PER_YEAR * TANK_DEMAND_DAYS)
        potential_based = round_int(rainwater_potential * TANK_POTENTIAL_SHARE)

        capacity = min(demand_based, potential_based, TANK_MAX_LITRES)
        capacity = max(capacity, TANK_MIN_LITRES)

        diameter = cylinder_diameter(capacity / 1000, TANK_HEIGHT_M)
        return capacity, TankDimensions(
            diameter=round_half_up(diameter, 1),
            height=TANK_HEIGHT_M
        )

    def recharge_system(self, user_input: UserInput, rainwater_potential: int) -> Tuple[int, PitDimensions]:
        """
        Sizes a recharge pit from the soil infiltration rate and the yearly
        volume it has to absorb.
        """
        infiltration_mm_hr = self.coefficients.infiltration_rates[user_input.soil_type]
        recharge_volume = round_int(rainwater_potential / 1000 * RECHARGE_FACTORS[user_input.soil_type])

        # Area needed to soak away an average rainy day's inflow in the operating window
        daily_inflow_litres = rainwater_potential / RAINY_DAYS_PER_YEAR
        infiltration_m_hr = infiltration_mm_hr / 1000
        min_area = max(
            PIT_MIN_AREA_M2,
            daily_inflow_litres / (infiltration_m_hr * INFILTRATION_HOURS_PER_DAY * 1000)
        )

        depth = min(PIT_MAX_DEPTH_M, max(PIT_MIN_DEPTH_M, user_input.groundwater_depth * PIT_DEPTH_FACTOR))

        # 20% extra for temporary storage
        storage_area = (recharge_volume * PIT_STORAGE_MARGIN) / depth
        side = max(math.ceil(math.sqrt(max(min_area, storage_area))), PIT_MIN_SIDE_M)

        return recharge_volume, PitDimensions(length=side, width=side, depth=depth)

    def costs(self, user_input: UserInput, tank_capacity: int, household_demand: int,
              has_recharge: bool) -> Tuple[SystemCost, int, int]:
        """Returns (system cost tiers, annual savings, payback years)."""
        cost_factors = self.coefficients.cost_factors

        base_cost = user_input.roof_area * cost_factors.base_cost_per_sqm
        tank_cost = tank_capacity * TANK_COST_PER_LITRE
        recharge_cost = user_input.roof_area * RECHARGE_COST_PER_SQM if has_recharge else 0
        total = base_cost + tank_cost + recharge_cost

        multipliers = cost_factors.budget_multipliers
        system_cost = SystemCost(
            low=round_int(total * multipliers["Low"]),
            medium=round_int(total * multipliers["Medium"]),
            high=round_int(total * multipliers["High"])
        )

        savable = min(household_demand, tank_capacity * REFILLS_PER_YEAR)
        annual_savings = round_int(savable * self.coefficients.water_rates.municipal_rate)

        payback = round_int(system_cost.medium / max(annual_savings, 1))
        return system_cost, annual_savings, min(payback, MAX_PAYBACK_YEARS)

    def feasibility(self, user_input: UserInput, city: CityData, rainwater_potential: int,
                    household_demand: int) -> Dict:
        score = BASE_SCORE
        recommendations: List[str] = []
        warnings: List[str] = []

        # 1. Rainfall adequacy (up to 25)
        if city.annual_rainfall > 1000:
            score += 25
            recommendations.append("Excellent rainfall - consider larger storage capacity")
        elif city.annual_rainfall > 600:
            score += 15
            recommendations.append("Good rainfall - standard system recommended")
        else:
            score += 5
            warnings.append("Low rainfall area - consider supplementary water sources")

        # 2. Roof suitability (up to 20)
        if user_input.roof_type in ("RCC", "GI"):
            score += 20
            recommendations.append(f"{user_input.roof_type} roof is excellent for rainwater harvesting")
        elif user_input.roof_type == "Tiles":
            score += 15
            recommendations.append("Clay/concrete tiles are suitable with proper first flush diverter")
        else:
            score += 10
            warnings.append("Asbestos roofs require regular cleaning and filtration")

        # 3. Soil (up to 15)
        if user_input.soil_type == "Sandy":
            score += 15
            recommendations.append("Sandy soil is ideal for groundwater recharge")
        elif user_input.soil_type == "Loamy":
            score += 10
            recommendations.append("Loamy soil provides good infiltration for recharge")
        else:
            score += 5
            recommendations.append("Clayey soil requires larger recharge structures")

        # 4. Groundwater depth (up to 15)
        depth = user_input.groundwater_depth
        if 3 < depth < 30:
            score += 15
            recommendations.append("Optimal groundwater depth for recharge systems")
        elif depth <= 3:
            score += 5
            warnings.append("Shallow groundwater - ensure proper drainage to prevent waterlogging")
        else:
            score += 10
            warnings.append("Deep groundwater - recharge benefits may take longer to realize")

        # 5. Coverage (up to 10)
        coverage = rainwater_potential / household_demand * 100
        if coverage > 80:
            score += 10
            recommendations.append("Excellent coverage - consider selling excess water or larger recharge")
        elif coverage > 50:
            score += 7
            recommendations.append("Good coverage - system will significantly reduce water bills")
        else:
            score += 3
            recommendations.append("Partial coverage - combine with water conservation measures")

        # Site conditions
        if user_input.bird_nesting:
            warnings.append("Bird nesting detected - install mesh covers and regular cleaning required")
        if user_input.environment == "Industrial":
            warnings.append("Industrial area - test water quality regularly and use appropriate filtration")
        if monsoon_share(city.monthly_rainfall, city.annual_rainfall) > MONSOON_DEPENDENCY_SHARE:
            warnings.append("High monsoon dependency - 70%+ rainfall in 4 months")

        # Standard advice
        recommendations.append("Install first flush diverter to improve water quality")
        if user_input.purpose == "Domestic":
            recommendations.append("Consider UV/RO purification for drinking water use")
        if user_input.has_open_space:
            recommendations.append("Connect overflow to recharge pit for maximum benefit")

        score = min(100, score)
        if score >= 80:
            level = "High"
        elif score >= 60:
            level = "Medium"
        else:
            level = "Low"

        return {
            "feasibility_score": score,
            "feasibility_level": level,
            "recommendations": recommendations,
            "warnings": warnings
        }

    # --- Orchestration ---

    def calculate(self, user_input: UserInput, calculation_type: CalculationType) -> CalculationResults:
        """
        Runs every stage in order and assembles one result record.

        Raises:
            CityNotFoundError: the city table is empty.
            ValueError: unknown calculation_type.
        """
        if calculation_type not in ("rainwater", "recharge"):
            raise ValueError(f"Unknown calculation type: {calculation_type}")

        city = resolve_city(self.cities, user_input.location, user_input.pincode)
        if city is None:
            raise CityNotFoundError(user_input.location, user_input.pincode)
        logger.info(f"📍 Resolved '{user_input.location}' ({user_input.pincode}) to {city.city}, {city.state}")

        has_recharge = calculation_type == "recharge"

        potential, monthly = self.rainwater_potential(user_input, city)
        demand = self.household_demand(user_input)
        coverage = min(100, round_int(potential / demand * 100))
        first_flush = round_int(user_input.roof_area * FIRST_FLUSH_MM)
        logger.debug(f"Potential={potential}L Demand={demand}L Coverage={coverage}%")

        tank_capacity, tank_dimensions = self.storage_tank(potential, demand)
        system_cost, annual_savings, payback = self.costs(user_input, tank_capacity, demand, has_recharge)
        feasibility = self.feasibility(user_input, city, potential, demand)
        logger.debug(f"Tank={tank_capacity}L Payback={payback}y Score={feasibility['feasibility_score']}")

        recharge_volume = None
        pit_dimensions = None
        if has_recharge:
            recharge_volume, pit_dimensions = self.recharge_system(user_input, potential)

        return CalculationResults(
            rainwater_potential=potential,
            monthly_potential=monthly,
            household_demand=demand,
            coverage_percentage=coverage,
            first_flush=first_flush,
            tank_capacity=tank_capacity,
            tank_dimensions=tank_dimensions,
            recharge_volume=recharge_volume,
            pit_dimensions=pit_dimensions,
            system_cost=system_cost,
            annual_savings=annual_savings,
            payback_period=payback,
            **feasibility
        )


@lru_cache(maxsize=1)
def get_calculation_engine() -> CalculationEngine:
    """Shared engine bound to the process-wide reference tables."""
    return CalculationEngine(get_reference_data())
