import unittest

from fastapi.testclient import TestClient

from rtrwh_calculator.main import app
from rtrwh_calculator.models.reference import Coefficients
from rtrwh_calculator.services.calculation_engine import CalculationEngine, get_calculation_engine
from rtrwh_calculator.services.errors import ReferenceDataError
from rtrwh_calculator.services.reference_data import ReferenceData, get_reference_data
from rtrwh_calculator.services.submission_store import MemorySubmissionStore, get_submission_store

PAYLOAD = {
    "name": "Asha Verma",
    "location": "Delhi",
    "pincode": "110001",
    "roof_area": 100,
    "roof_type": "RCC",
    "environment": "Residential",
    "bird_nesting": False,
    "dwellers": 4,
    "purpose": "Domestic",
    "has_open_space": True,
    "open_space_area": 25,
    "groundwater_depth": 15,
    "soil_type": "Loamy",
    "budget": "Medium"
}


class TestCalculationsAPI(unittest.TestCase):

    def setUp(self):
        self.store = MemorySubmissionStore()
        app.dependency_overrides[get_submission_store] = lambda: self.store
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "active")

    def test_rainwater_calculation(self):
        response = self.client.post("/api/v1/calculations/rainwater", json=PAYLOAD)

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["calculation_type"], "rainwater")
        self.assertEqual(body["user_inputs"]["pincode"], "110001")

        results = body["results"]
        self.assertEqual(results["rainwater_potential"], 60480)
        self.assertEqual(len(results["monthly_potential"]), 12)
        self.assertEqual(results["tank_capacity"], 12096)
        self.assertNotIn("recharge_volume", results)
        self.assertNotIn("pit_dimensions", results)

        # Stored under the returned id
        self.assertIsNotNone(self.store.get_submission(body["id"]))

    def test_recharge_calculation(self):
        response = self.client.post("/api/v1/calculations/recharge", json=PAYLOAD)

        self.assertEqual(response.status_code, 201)
        results = response.json()["results"]
        self.assertEqual(results["recharge_volume"], 48)
        self.assertEqual(results["pit_dimensions"]["depth"], 4)

    def test_unknown_calculation_type(self):
        response = self.client.post("/api/v1/calculations/desalination", json=PAYLOAD)
        self.assertEqual(response.status_code, 422)

    def test_input_validation(self):
        bad_inputs = [
            dict(PAYLOAD, pincode="1100"),
            dict(PAYLOAD, roof_area=0),
            dict(PAYLOAD, dwellers=0),
            dict(PAYLOAD, roof_type="Thatch"),
            dict(PAYLOAD, groundwater_depth=-1),
            dict(PAYLOAD, name="A"),
        ]
        for payload in bad_inputs:
            with self.subTest(payload=payload):
                response = self.client.post("/api/v1/calculations/rainwater", json=payload)
                self.assertEqual(response.status_code, 422)
        self.assertEqual(self.store.get_recent_submissions(), [])

    def test_get_and_list_submissions(self):
        first = self.client.post("/api/v1/calculations/rainwater", json=PAYLOAD).json()
        second = self.client.post("/api/v1/calculations/recharge", json=PAYLOAD).json()

        fetched = self.client.get(f"/api/v1/calculations/{first['id']}")
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["id"], first["id"])

        listing = self.client.get("/api/v1/calculations/", params={"limit": 1}).json()
        self.assertEqual(listing["count"], 1)
        self.assertEqual(listing["data"][0]["id"], second["id"])

    def test_get_missing_submission(self):
        response = self.client.get("/api/v1/calculations/does-not-exist")
        self.assertEqual(response.status_code, 404)

    def test_empty_city_table(self):
        reference = get_reference_data()
        empty = CalculationEngine(ReferenceData(cities=(), coefficients=reference.coefficients))
        app.dependency_overrides[get_calculation_engine] = lambda: empty

        response = self.client.post("/api/v1/calculations/rainwater", json=PAYLOAD)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(self.store.get_recent_submissions(), [])

    def test_broken_reference_data(self):
        def broken():
            raise ReferenceDataError("Reference file not found: cities.json")

        app.dependency_overrides[get_calculation_engine] = broken

        response = self.client.post("/api/v1/calculations/rainwater", json=PAYLOAD)

        self.assertEqual(response.status_code, 503)
        self.assertIn("cities.json", response.json()["detail"])


class TestReferenceAPI(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_list_cities(self):
        response = self.client.get("/api/v1/cities")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Delhi", [c["city"] for c in response.json()])

    def test_get_city(self):
        response = self.client.get("/api/v1/cities/chennai")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["state"], "Tamil Nadu")

        self.assertEqual(self.client.get("/api/v1/cities/Atlantis").status_code, 404)

    def test_coefficients(self):
        body = self.client.get("/api/v1/coefficients").json()
        Coefficients.model_validate(body)
        self.assertEqual(body["water_rates"]["domestic_consumption"], 135)


if __name__ == '__main__':
    unittest.main()
