import tempfile
import unittest
from pathlib import Path
from kecarajo.events.Event_Bus import GLOBAL_EVENT_BUS, PRICE_ALERT_TRIGGERED
from kecarajo.infra.Price_Repository import PriceRepository
from kecarajo.logic.pricing.price_tracker import (
    PriceTracker,
    ProductNotFoundError,
    StoreNotFoundError,
    calculate_adjusted_price,
    calculate_price_forecast,
    normalize_product_name,
)


class TestPriceHelpers(unittest.TestCase):

    def test_normalize_product_name(self):
        self.assertEqual(normalize_product_name("  Azúcar (1kg)! "), "azucar 1kg")

    def test_adjusted_price_converts_into_price_unit(self):
        self.assertAlmostEqual(calculate_adjusted_price(1500, "kg", 500, "g"), 750)
        self.assertAlmostEqual(calculate_adjusted_price(1000, "L", 250, "ml"), 250)
        self.assertAlmostEqual(calculate_adjusted_price(2, "g", 1, "kg"), 2000)

    def test_adjusted_price_without_known_conversion(self):
        self.assertEqual(calculate_adjusted_price(1200, "unidad", 3, "paquete"), 3600)
        self.assertEqual(calculate_adjusted_price(1200, "unidad", 3), 3600)

    def test_forecast(self):
        self.assertIsNone(calculate_price_forecast([100, 110]))
        forecast = calculate_price_forecast([10, 20, 30])
        self.assertAlmostEqual(forecast["next_week"], 110)
        self.assertAlmostEqual(forecast["confidence"], 1.0)

    def test_flat_series_forecast(self):
        forecast = calculate_price_forecast([50, 50, 50, 50])
        self.assertAlmostEqual(forecast["next_week"], 50)
        self.assertEqual(forecast["confidence"], 1.0)

    def test_forecast_never_negative(self):
        self.assertEqual(calculate_price_forecast([30, 20, 10])["next_week"], 0.0)


class TestPriceTracker(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.repo = PriceRepository(Path(tmp.name) / "precios")
        self.tracker = PriceTracker(self.repo)

    def test_seed_catalogue(self):
        self.assertEqual(len(self.repo.get_stores()), 5)
        self.assertEqual(len(self.repo.get_products()), 10)
        self.assertEqual(len(self.repo.get_prices()), 50)
        arroz = {p["store_id"]: p["price"] for p in self.repo.get_prices("arroz-1")}
        self.assertEqual(arroz, {"carrefour": 1500, "coto": 1425, "dia": 1320, "jumbo": 1680, "changomas": 1380})

    def test_seed_runs_once(self):
        self.repo.record_price("arroz-1", "dia", 999)
        again = PriceRepository(self.repo.directory)
        self.assertIn(999, [p["price"] for p in again.get_prices("arroz-1")])

    def test_find_product(self):
        self.assertEqual(self.tracker.find_product("Leche")["id"], "leche-1")
        self.assertEqual(self.tracker.find_product("ARROZ largo")["id"], "arroz-1")
        self.assertIsNone(self.tracker.find_product("Yerba"))
        self.assertIsNone(self.tracker.find_product("  "))

    def test_compare_product_prices(self):
        result = self.tracker.compare_product_prices("arroz")
        self.assertEqual(result["lowest_price"]["store"]["id"], "dia")
        self.assertEqual(result["highest_price"]["store"]["id"], "jumbo")
        self.assertAlmostEqual(result["average_price"], 1461)
        self.assertEqual(result["price_range"], {"min": 1320, "max": 1680})
        self.assertAlmostEqual(result["savings"]["amount"], 360)
        self.assertAlmostEqual(result["savings"]["percentage"], 360 / 1680 * 100)
        self.assertEqual([r["adjusted_price"] for r in result["prices"]], sorted(r["adjusted_price"] for r in result["prices"]))

    def test_compare_with_quantity_and_unit(self):
        result = self.tracker.compare_product_prices("arroz", 500, "g")
        self.assertAlmostEqual(result["lowest_price"]["price"], 660)

    def test_compare_unknown_product(self):
        self.assertIsNone(self.tracker.compare_product_prices("Yerba"))

    def test_basket(self):
        stores = self.tracker.compare_basket_prices([
            {"name": "Leche", "quantity": 2},
            {"name": "Yerba", "quantity": 1},
        ])
        self.assertEqual(stores[0]["store"]["id"], "dia")
        self.assertEqual(stores[-1]["store"]["id"], "jumbo")
        self.assertEqual(stores[0]["total_items"], 1)
        self.assertEqual(stores[0]["missing_items"], ["Yerba"])
        self.assertEqual(stores[-1]["savings"], 0)
        self.assertAlmostEqual(stores[0]["savings"], stores[-1]["total_price"] - stores[0]["total_price"])
        self.assertEqual(stores[0]["price_breakdown"][0]["product_id"], "leche-1")

    def test_trends(self):
        self.tracker.record_price("arroz-1", "dia", 1452)
        trends = {t["store_id"]: t for t in self.tracker.get_product_price_trends("arroz-1")}
        self.assertEqual(len(trends), 5)
        self.assertEqual(trends["dia"]["trend"], "increasing")
        self.assertAlmostEqual(trends["dia"]["change_percentage"], 10)
        self.assertIsNone(trends["dia"]["forecast"])
        self.assertEqual(trends["coto"]["trend"], "stable")

    def test_trends_unknown_product(self):
        with self.assertRaises(ProductNotFoundError):
            self.tracker.get_product_price_trends("yerba-1")

    def test_average_price(self):
        self.assertAlmostEqual(self.tracker.get_average_price("arroz-1"), 1461)
        self.assertIsNone(self.tracker.get_average_price("yerba-1"))

    def test_record_price_validation(self):
        with self.assertRaises(ProductNotFoundError):
            self.tracker.record_price("yerba-1", "dia", 100)
        with self.assertRaises(StoreNotFoundError):
            self.tracker.record_price("arroz-1", "vea", 100)

    def test_find_deals(self):
        self.assertEqual(len(self.tracker.find_deals()), 10)
        self.assertEqual(self.tracker.find_deals(min_discount=50), [])
        lacteos = self.tracker.find_deals(category="lacteos")
        self.assertEqual({d["product"]["id"] for d in lacteos}, {"leche-1", "huevos-1"})


class TestPriceAlerts(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tracker = PriceTracker(PriceRepository(Path(tmp.name)))
        self.fired = []
        self._listener = lambda name, payload: self.fired.append(payload["alert"])
        GLOBAL_EVENT_BUS.subscribe(PRICE_ALERT_TRIGGERED, self._listener)
        self.addCleanup(GLOBAL_EVENT_BUS.unsubscribe, PRICE_ALERT_TRIGGERED, self._listener)

    def test_alert_triggered_on_creation(self):
        alert = self.tracker.create_price_alert("arroz-1", 1400, "offline-user")
        self.assertTrue(alert["id"].startswith("alert_"))
        self.assertTrue(alert["triggered"])
        self.assertEqual(alert["current_price"], 1320)
        self.assertEqual([a["id"] for a in self.fired], [alert["id"]])

    def test_alert_triggered_by_new_price(self):
        alert = self.tracker.create_price_alert("arroz-1", 1000, "offline-user")
        self.assertFalse(alert["triggered"])
        self.assertEqual(self.fired, [])

        self.tracker.record_price("arroz-1", "dia", 950)
        self.assertEqual([a["id"] for a in self.fired], [alert["id"]])
        stored = self.tracker.repository.get_alerts()[0]
        self.assertTrue(stored["triggered"])
        self.assertEqual(stored["current_price"], 950)

        # already triggered alerts are not fired again
        self.tracker.record_price("arroz-1", "dia", 900)
        self.assertEqual(len(self.fired), 1)

    def test_alert_unknown_product(self):
        with self.assertRaises(ProductNotFoundError):
            self.tracker.create_price_alert("yerba-1", 100, "offline-user")
