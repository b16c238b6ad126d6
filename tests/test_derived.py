import datetime as dt
import unittest

from weathercore import derived
from weathercore.domain import AlertKind, ConditionFamily, ThemeClass
from payloads import FIXED_NOW, make_snapshot

SUNRISE = dt.datetime(2024, 6, 1, 4, 45, tzinfo=dt.timezone.utc)
SUNSET = dt.datetime(2024, 6, 1, 21, 15, tzinfo=dt.timezone.utc)


class TestLabels(unittest.TestCase):
    def test_humidity_status(self):
        self.assertEqual(derived.humidity_status(29), "Dry")
        self.assertEqual(derived.humidity_status(30), "Comfortable")
        self.assertEqual(derived.humidity_status(59), "Comfortable")
        self.assertEqual(derived.humidity_status(60), "Humid")

    def test_visibility_status(self):
        self.assertEqual(derived.visibility_status(10001), "Excellent")
        self.assertEqual(derived.visibility_status(10000), "Good")
        self.assertEqual(derived.visibility_status(5001), "Good")
        self.assertEqual(derived.visibility_status(5000), "Moderate")
        self.assertEqual(derived.visibility_status(2001), "Moderate")
        self.assertEqual(derived.visibility_status(2000), "Poor")

    def test_wind_direction_label(self):
        self.assertEqual(derived.wind_direction_label(0), "N")
        self.assertEqual(derived.wind_direction_label(22.5), "NE")
        self.assertEqual(derived.wind_direction_label(90), "E")
        self.assertEqual(derived.wind_direction_label(200), "S")
        self.assertEqual(derived.wind_direction_label(350), "N")
        self.assertEqual(derived.wind_direction_label(405), "NE")


class TestNightAndTheme(unittest.TestCase):
    def test_is_night(self):
        self.assertFalse(derived.is_night(FIXED_NOW, SUNRISE, SUNSET))
        self.assertTrue(derived.is_night(SUNSET + dt.timedelta(minutes=1), SUNRISE, SUNSET))
        self.assertTrue(derived.is_night(SUNRISE - dt.timedelta(minutes=1), SUNRISE, SUNSET))
        self.assertFalse(derived.is_night(SUNSET, SUNRISE, SUNSET))

    def test_theme_by_family(self):
        self.assertEqual(derived.theme_class(ConditionFamily.RAIN, False, False), ThemeClass.RAIN)
        self.assertEqual(derived.theme_class(ConditionFamily.DRIZZLE, False, False), ThemeClass.RAIN)
        self.assertEqual(derived.theme_class(ConditionFamily.THUNDERSTORM, False, False), ThemeClass.RAIN)
        self.assertEqual(derived.theme_class(ConditionFamily.SNOW, False, False), ThemeClass.SNOW)
        self.assertEqual(derived.theme_class(ConditionFamily.CLEAR, False, False), ThemeClass.SUNNY)
        self.assertEqual(derived.theme_class(ConditionFamily.CLOUDS, False, False), ThemeClass.NEUTRAL)
        self.assertEqual(derived.theme_class(ConditionFamily.FOG, False, False), ThemeClass.NEUTRAL)

    def test_night_and_dark_mode_override_weather(self):
        self.assertEqual(derived.theme_class(ConditionFamily.RAIN, True, False), ThemeClass.NEUTRAL)
        self.assertEqual(derived.theme_class(ConditionFamily.CLEAR, False, True), ThemeClass.DARK)
        self.assertEqual(derived.theme_class(ConditionFamily.SNOW, True, True), ThemeClass.DARK)

    def test_snapshot_theme(self):
        snapshot = make_snapshot(weathercode=0)
        self.assertEqual(derived.snapshot_theme(snapshot, False, now=FIXED_NOW), ThemeClass.SUNNY)
        late = dt.datetime(2024, 6, 1, 22, 0, tzinfo=dt.timezone.utc)
        self.assertEqual(derived.snapshot_theme(snapshot, False, now=late), ThemeClass.NEUTRAL)


class TestAlerts(unittest.TestCase):
    def test_calm_conditions_raise_nothing(self):
        self.assertEqual(derived.alerts(make_snapshot()), [])

    def test_combined_alerts_keep_fixed_order(self):
        snapshot = make_snapshot(temperature=36, wind_speed=20, aqi_level=4, weathercode=95)
        kinds = [a.kind for a in derived.alerts(snapshot)]
        self.assertEqual(kinds, [AlertKind.HEAT, AlertKind.WIND, AlertKind.AIR_QUALITY, AlertKind.STORM])

    def test_freeze_and_rain(self):
        alerts = derived.alerts(make_snapshot(temperature=-1, weathercode=63))
        self.assertEqual([a.kind for a in alerts], [AlertKind.FREEZE, AlertKind.RAIN])
        self.assertEqual(alerts[0].message, "Freezing Warning: Wear warm clothes!")

    def test_thresholds_are_strict(self):
        snapshot = make_snapshot(temperature=35, wind_speed=15, aqi_level=3)
        self.assertEqual(derived.alerts(snapshot), [])
        self.assertEqual(derived.alerts(make_snapshot(temperature=0)), [])

    def test_drizzle_raises_no_rain_alert(self):
        self.assertEqual(derived.alerts(make_snapshot(weathercode=51)), [])

    def test_alerts_are_deterministic(self):
        snapshot = make_snapshot(temperature=40, weathercode=65, aqi_level=5)
        self.assertEqual(derived.alerts(snapshot), derived.alerts(snapshot))


if __name__ == "__main__":
    unittest.main()
