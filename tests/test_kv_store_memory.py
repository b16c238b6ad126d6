import threading
import unittest

from weathercore.kv_store import InMemoryKeyValueStore


class TestInMemoryKeyValueStore(unittest.TestCase):
    def test_set_get_delete(self):
        store = InMemoryKeyValueStore()
        self.assertIsNone(store.get("weather_unit"))
        store.set("weather_unit", "imperial")
        self.assertEqual(store.get("weather_unit"), "imperial")
        store.set("weather_unit", "metric")
        self.assertEqual(store.get("weather_unit"), "metric")
        store.delete("weather_unit")
        self.assertIsNone(store.get("weather_unit"))
        # deleting a missing key is a no-op
        store.delete("weather_unit")

    def test_clear(self):
        store = InMemoryKeyValueStore()
        store.set("a", "1")
        store.set("b", "2")
        store.clear()
        self.assertIsNone(store.get("a"))
        self.assertIsNone(store.get("b"))

    def test_concurrent_writes(self):
        store = InMemoryKeyValueStore()

        def _writer(n):
            for i in range(200):
                store.set(f"k{n}-{i}", str(i))

        threads = [threading.Thread(target=_writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(store.get("k3-199"), "199")


if __name__ == "__main__":
    unittest.main()
