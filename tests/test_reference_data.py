import json
import tempfile
import unittest
from pathlib import Path

from rtrwh_calculator.config.settings import CITIES_FILE, COEFFICIENTS_FILE
from rtrwh_calculator.services.errors import ReferenceDataError
from rtrwh_calculator.services.reference_data import (
    ReferenceData, get_reference_data, load_cities, load_coefficients
)


class TestReferenceData(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name, payload) -> Path:
        path = self.tmp_dir / name
        path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
        return path

    def test_packaged_tables_load(self):
        cities = load_cities(CITIES_FILE)
        coefficients = load_coefficients(COEFFICIENTS_FILE)

        self.assertGreater(len(cities), 0)
        self.assertIn("Delhi", [c.city for c in cities])
        for city in cities:
            self.assertEqual(len(city.monthly_rainfall), 12)
            self.assertEqual(len(city.pincode), 6)
            self.assertAlmostEqual(sum(city.monthly_rainfall), city.annual_rainfall)
        self.assertEqual(coefficients.runoff_coefficients["RCC"], 0.8)

    def test_get_reference_data_is_cached(self):
        self.assertIs(get_reference_data(), get_reference_data())

    def test_find_city_by_name(self):
        reference = ReferenceData(cities=load_cities(CITIES_FILE), coefficients=load_coefficients(COEFFICIENTS_FILE))
        self.assertEqual(reference.find_city_by_name("  mumbai ").state, "Maharashtra")
        self.assertIsNone(reference.find_city_by_name("Atlantis"))

    def test_missing_file(self):
        with self.assertRaises(ReferenceDataError):
            load_cities(self.tmp_dir / "nope.json")

    def test_invalid_json(self):
        path = self._write("cities.json", "[{not json")
        with self.assertRaises(ReferenceDataError):
            load_cities(path)

    def test_city_table_must_be_list(self):
        path = self._write("cities.json", {"city": "Delhi"})
        with self.assertRaises(ReferenceDataError):
            load_cities(path)

    def test_city_needs_twelve_months(self):
        path = self._write("cities.json", [{
            "city": "Delhi", "state": "Delhi", "pincode": "110001",
            "monthly_rainfall": [10] * 11, "annual_rainfall": 110,
            "groundwater_depth": 20, "aquifer_type": "Alluvial", "region": "North"
        }])
        with self.assertRaises(ReferenceDataError):
            load_cities(path)

    def test_coefficients_must_cover_every_roof_type(self):
        raw = json.loads(Path(COEFFICIENTS_FILE).read_text(encoding="utf-8"))
        del raw["runoff_coefficients"]["Tiles"]
        path = self._write("coefficients.json", raw)

        with self.assertRaises(ReferenceDataError) as ctx:
            load_coefficients(path)
        self.assertIn("Tiles", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
