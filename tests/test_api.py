import unittest

from fastapi.testclient import TestClient

from weathercore.api import get_service
from weathercore.config import Settings
from weathercore.kv_store import InMemoryKeyValueStore
from weathercore.main import app as fastapi_app
from weathercore.weather_service import WeatherService
from payloads import make_current_payload, make_data_source, raise_connection_error


class TestApi(unittest.TestCase):
    def setUp(self):
        self.calls = []
        self.service = self._service()
        fastapi_app.dependency_overrides[get_service] = lambda: self.service
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        fastapi_app.dependency_overrides.clear()

    def _service(self, **payloads):
        return WeatherService(
            make_data_source(calls=self.calls, **payloads),
            store=InMemoryKeyValueStore(),
            settings=Settings(default_city="London"),
        )

    def _fail_forecast(self):
        self.service.forecast.data_source.weather_current = raise_connection_error

    def test_search(self):
        resp = self.client.get("/v1/search", params={"q": "London"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(len(body), 2)
        self.assertEqual(body[1]["country_code"], "CA")

    def test_search_blank_query(self):
        resp = self.client.get("/v1/search", params={"q": "  "})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])
        self.assertEqual(self.calls, [])

    def test_snapshot_live(self):
        resp = self.client.get("/v1/snapshot", params={"q": "London", "units": "metric"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertFalse(body["served_from_cache"])
        self.assertFalse(body["degraded"])
        self.assertEqual(body["snapshot"]["current"]["location"]["name"], "London")
        self.assertEqual(body["air_quality_label"], "Good")
        self.assertTrue(body["air_quality_available"])
        self.assertEqual(body["highlights"]["wind_direction"], "S")
        self.assertEqual(body["highlights"]["temperature_unit"], "°C")
        self.assertEqual(body["alerts"], [])

    def test_snapshot_defaults_to_configured_city_and_stored_unit(self):
        self.service.preferences.set_unit("imperial")
        resp = self.client.get("/v1/snapshot")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.calls[0][:2], ("search", ("London",)))
        self.assertEqual(resp.json()["highlights"]["wind_speed_unit"], "mph")

    def test_snapshot_uses_last_city(self):
        self.service.preferences.set_last_city("Toronto")
        self.client.get("/v1/snapshot")
        self.assertEqual(self.calls[0][:2], ("search", ("Toronto",)))

    def test_snapshot_served_from_cache(self):
        self.client.get("/v1/snapshot", params={"q": "London"})
        self._fail_forecast()
        resp = self.client.get("/v1/snapshot", params={"q": "London"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["served_from_cache"])
        self.assertTrue(body["degraded"])

    def test_snapshot_without_cache_is_503(self):
        self._fail_forecast()
        resp = self.client.get("/v1/snapshot", params={"q": "London"})
        self.assertEqual(resp.status_code, 503)

    def test_snapshot_alerts_and_dark_theme(self):
        self.service = self._service(current=make_current_payload(weathercode=95, temperature=38.0))
        self.service.preferences.set_theme("dark")
        body = self.client.get("/v1/snapshot", params={"q": "London"}).json()
        self.assertEqual([a["kind"] for a in body["alerts"]], ["heat", "storm"])
        self.assertEqual(body["theme"], "dark")

    def test_snapshot_air_quality_degradation(self):
        self.service = self._service(air=raise_connection_error)
        body = self.client.get("/v1/snapshot", params={"q": "London"}).json()
        self.assertFalse(body["served_from_cache"])
        self.assertTrue(body["degraded"])
        self.assertFalse(body["air_quality_available"])
        self.assertEqual(body["snapshot"]["degradations"][0]["stage"], "air_quality")

    def test_snapshot_rejects_unknown_units(self):
        resp = self.client.get("/v1/snapshot", params={"q": "London", "units": "kelvin"})
        self.assertEqual(resp.status_code, 422)

    def test_compare(self):
        resp = self.client.get("/v1/compare", params={"a": "London", "b": "Paris", "units": "imperial"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["first"]["unit_system"], "imperial")
        self.assertIn("second", body)

    def test_compare_unknown_city_is_404(self):
        self.service = self._service(geocoding={"results": []})
        resp = self.client.get("/v1/compare", params={"a": "Atlantis", "b": "London"})
        self.assertEqual(resp.status_code, 404)

    def test_compare_upstream_failure_is_502(self):
        self._fail_forecast()
        resp = self.client.get("/v1/compare", params={"a": "London", "b": "Paris"})
        self.assertEqual(resp.status_code, 502)

    def test_preferences_round_trip(self):
        resp = self.client.get("/v1/preferences")
        self.assertEqual(resp.json(), {"unit_system": "metric", "theme": "light", "last_city": None})

        resp = self.client.put("/v1/preferences", json={"theme": "dark"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["theme"], "dark")
        self.assertEqual(resp.json()["unit_system"], "metric")

        resp = self.client.put("/v1/preferences", json={"unit_system": "imperial"})
        self.assertEqual(resp.json()["unit_system"], "imperial")
        self.assertEqual(resp.json()["theme"], "dark")

    def test_preferences_rejects_unknown_theme(self):
        resp = self.client.put("/v1/preferences", json={"theme": "sepia"})
        self.assertEqual(resp.status_code, 422)

    def test_favorites(self):
        self.assertEqual(self.client.get("/v1/favorites").json(), {"favorites": []})
        self.client.post("/v1/favorites/Oslo")
        resp = self.client.post("/v1/favorites/Lima")
        self.assertEqual(resp.json(), {"favorites": ["Oslo", "Lima"]})
        resp = self.client.post("/v1/favorites/Oslo")
        self.assertEqual(resp.json(), {"favorites": ["Oslo", "Lima"]})
        resp = self.client.delete("/v1/favorites/Oslo")
        self.assertEqual(resp.json(), {"favorites": ["Lima"]})


if __name__ == "__main__":
    unittest.main()
