import tempfile
import unittest
from datetime import date, timedelta
from pathlib import Path
from fastapi.testclient import TestClient
from kecarajo.api.api_run import app
from kecarajo.api.dependencies import get_pantry_repository, get_price_repository, get_shopping_list_repository
from kecarajo.infra.Pantry_Repository import PantryRepository
from kecarajo.infra.Price_Repository import PriceRepository
from kecarajo.infra.ShoppingList_Repository import ShoppingListRepository


PLAN = {
    "ingredients": [
        {"name": "Tomate", "quantity": 200, "unit": "g"},
        {"name": "Arroz", "quantity": 500, "unit": "g"},
        {"name": "tomate", "quantity": 300, "unit": "g"},
    ],
    "pantry": [{"name": "Arroz", "quantity": 200, "unit": "g"}],
    "recipe_names": ["Ensalada", "Arroz con pollo", "Salsa"],
}


class ApiTestCase(unittest.TestCase):
    """Runs the app against repositories in a temporary data directory."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        data_dir = Path(tmp.name)
        self.pantry_repo = PantryRepository(data_dir / "pantry.json")
        self.lists_repo = ShoppingListRepository(data_dir / "shopping_lists.json")
        self.price_repo = PriceRepository(data_dir / "precios")
        app.dependency_overrides[get_pantry_repository] = lambda: self.pantry_repo
        app.dependency_overrides[get_shopping_list_repository] = lambda: self.lists_repo
        app.dependency_overrides[get_price_repository] = lambda: self.price_repo
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)


class TestGenerateShoppingListAPI(ApiTestCase):

    def test_generate(self):
        resp = self.client.post('/api/shopping-list/generate', json=PLAN)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["totalItems"], 2)
        items = {i["nombre"]: i for i in data["items"]}
        self.assertEqual(items["Tomate"]["cantidad"], 500)
        self.assertEqual(items["Tomate"]["recetasQueLoUsan"], ["Ensalada", "Salsa"])
        self.assertEqual(items["Arroz"]["cantidad"], 300)
        self.assertEqual(set(data["porCategoria"]), {"verduleria", "almacen"})
        self.assertIn("desde", data["rangoFechas"])
        self.assertNotIn("savedListId", data)

    def test_generate_with_stored_pantry(self):
        self.pantry_repo.add_item({"name": "Arroz", "quantity": 100, "unit": "g"})
        body = dict(PLAN, use_stored_pantry=True)
        data = self.client.post('/api/shopping-list/generate', json=body).json()
        items = {i["nombre"]: i for i in data["items"]}
        self.assertEqual(items["Arroz"]["cantidad"], 200)

    def test_generate_and_save(self):
        body = dict(PLAN, save_as="Semana 12")
        data = self.client.post('/api/shopping-list/generate', json=body).json()
        saved = self.lists_repo.get_list(data["savedListId"])
        self.assertTrue(saved["is_active"])
        self.assertEqual([i["nombre"] for i in saved["items"]], ["Tomate", "Arroz"])

    def test_empty_plan(self):
        data = self.client.post('/api/shopping-list/generate', json={}).json()
        self.assertEqual(data["items"], [])
        self.assertEqual(data["porCategoria"], {})

    def test_validation(self):
        bad = {"ingredients": [{"name": "Arroz", "quantity": -1, "unit": "g"}]}
        self.assertEqual(self.client.post('/api/shopping-list/generate', json=bad).status_code, 422)
        bad = {"ingredients": [{"name": "   ", "quantity": 1}]}
        self.assertEqual(self.client.post('/api/shopping-list/generate', json=bad).status_code, 422)

    def test_export_pdf(self):
        resp = self.client.post('/api/shopping-list/export', json=PLAN)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["content-type"], "application/pdf")
        self.assertIn("attachment", resp.headers["content-disposition"])
        self.assertTrue(resp.content.startswith(b"%PDF"))


class TestPantryAPI(ApiTestCase):

    def test_crud(self):
        resp = self.client.post('/api/pantry', json={"name": "Leche", "quantity": 2, "unit": "L", "category": "lacteos"})
        self.assertEqual(resp.status_code, 201)
        item_id = resp.json()["id"]

        data = self.client.get('/api/pantry', params={"category": "lacteos"}).json()
        self.assertEqual(data["count"], 1)
        self.assertEqual(self.client.get('/api/pantry', params={"category": "almacen"}).json()["count"], 0)

        resp = self.client.patch(f'/api/pantry/{item_id}', json={"quantity": 1})
        self.assertEqual(resp.json()["quantity"], 1)
        self.assertEqual(self.client.delete(f'/api/pantry/{item_id}').status_code, 200)
        self.assertEqual(self.client.delete(f'/api/pantry/{item_id}').status_code, 404)
        self.assertEqual(self.client.patch(f'/api/pantry/{item_id}', json={"quantity": 1}).status_code, 404)

    def test_invalid_category(self):
        resp = self.client.post('/api/pantry', json={"name": "Leche", "category": "bebidas"})
        self.assertEqual(resp.status_code, 422)

    def test_update_is_validated_like_create(self):
        item_id = self.client.post('/api/pantry', json={"name": "Arroz", "category": "almacen"}).json()["id"]
        self.assertEqual(self.client.patch(f'/api/pantry/{item_id}', json={"category": "bebidas"}).status_code, 422)
        self.assertEqual(self.client.patch(f'/api/pantry/{item_id}', json={"name": "   "}).status_code, 422)
        self.assertEqual(self.client.patch(f'/api/pantry/{item_id}', json={"quantity": None}).status_code, 422)
        stored = self.pantry_repo.get_item(item_id)
        self.assertEqual((stored["name"], stored["category"]), ("Arroz", "almacen"))

        resp = self.client.patch(f'/api/pantry/{item_id}', json={"name": "  Arroz largo  "})
        self.assertEqual(resp.json()["name"], "Arroz largo")

    def test_update_can_clear_expiry(self):
        item = self.client.post('/api/pantry', json={"name": "Leche", "unit": "L", "expiresAt": "2026-06-01"}).json()
        self.assertEqual(item["expiresAt"], "01-06-2026")
        resp = self.client.patch(f'/api/pantry/{item["id"]}', json={"expiresAt": None})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["expiresAt"], "")
        self.assertEqual(resp.json()["name"], "Leche")

    def test_stock_changes_publish_alert_events(self):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        with TestClient(app) as client:
            cursor = client.get('/api/events').json()["next_cursor"]
            item_id = client.post('/api/pantry', json={
                "name": "Arroz", "quantity": 5000, "unit": "g", "expiresAt": tomorrow,
            }).json()["id"]
            client.patch(f'/api/pantry/{item_id}', json={"quantity": 10})
            events = client.get('/api/events', params={"since": cursor}).json()["events"]
        self.assertEqual([e["type"] for e in events],
                         ["pantry.near_expiry", "pantry.low_stock", "pantry.near_expiry"])
        low = events[1]
        self.assertEqual((low["name"], low["remaining"], low["threshold"]), ("Arroz", 10, 200))
        self.assertEqual(events[0]["days_left"], 1)

    def test_alerts(self):
        soon = (date.today() + timedelta(days=1)).isoformat()
        self.pantry_repo.add_item({"name": "Yogur", "quantity": 4, "unit": "unidades", "expiresAt": soon})
        self.pantry_repo.add_item({"name": "Sal", "quantity": 100, "unit": "g"})
        data = self.client.get('/api/pantry/alerts').json()
        self.assertEqual([i["name"] for i in data["expiring_soon"]], ["Yogur"])
        self.assertEqual([i["name"] for i in data["low_stock"]], ["Sal"])
        self.assertEqual(self.client.get('/api/pantry/alerts', params={"window": 0}).json()["expiring_soon"], [])


class TestShoppingListsAPI(ApiTestCase):

    def test_list_crud(self):
        self.assertEqual(self.client.get('/api/shopping-lists/active').status_code, 404)
        resp = self.client.post('/api/shopping-lists', json={"name": "Semana 1", "is_active": True})
        self.assertEqual(resp.status_code, 201)
        list_id = resp.json()["id"]

        self.assertEqual(self.client.get('/api/shopping-lists/active').json()["id"], list_id)
        self.assertEqual(self.client.get('/api/shopping-lists').json()["count"], 1)
        resp = self.client.patch(f'/api/shopping-lists/{list_id}', json={"name": "Asado"})
        self.assertEqual(resp.json()["name"], "Asado")
        self.assertEqual(self.client.delete(f'/api/shopping-lists/{list_id}').status_code, 200)
        self.assertEqual(self.client.get(f'/api/shopping-lists/{list_id}').status_code, 404)

    def test_items_and_move_to_pantry(self):
        list_id = self.client.post('/api/shopping-lists', json={"name": "Semana 1"}).json()["id"]
        resp = self.client.post(f'/api/shopping-lists/{list_id}/items',
                                json={"nombre": "Arroz", "cantidad": 1, "unidad": "kg"})
        self.assertEqual(resp.status_code, 201)
        arroz = resp.json()
        self.assertEqual(arroz["categoria"], "almacen")
        yerba = self.client.post(f'/api/shopping-lists/{list_id}/items', json={"nombre": "Yerba"}).json()

        toggled = self.client.post(f'/api/shopping-lists/{list_id}/items/{arroz["id"]}/toggle').json()
        self.assertTrue(toggled["comprado"])

        data = self.client.post(f'/api/shopping-lists/{list_id}/to-pantry').json()
        self.assertEqual(data["count"], 1)
        stored = self.pantry_repo.load_items()
        self.assertEqual([(i["name"], i["quantity"], i["unit"], i["category"]) for i in stored],
                         [("Arroz", 1, "kg", "almacen")])
        remaining = self.client.get(f'/api/shopping-lists/{list_id}').json()["items"]
        self.assertEqual([i["id"] for i in remaining], [yerba["id"]])

        self.assertEqual(self.client.delete(f'/api/shopping-lists/{list_id}/items/{yerba["id"]}').status_code, 200)
        self.assertEqual(self.client.delete(f'/api/shopping-lists/{list_id}/items/{yerba["id"]}').status_code, 404)

    def test_unknown_list(self):
        self.assertEqual(self.client.post('/api/shopping-lists/nope/items', json={"nombre": "Pan"}).status_code, 404)
        self.assertEqual(self.client.post('/api/shopping-lists/nope/to-pantry').status_code, 404)


class TestPreciosAPI(ApiTestCase):

    def test_comparar(self):
        resp = self.client.get('/api/precios/comparar', params={"producto": "arroz", "cantidad": 500, "unidad": "g"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["lowest_price"]["store"]["id"], "dia")
        self.assertAlmostEqual(data["lowest_price"]["price"], 660)
        self.assertEqual(self.client.get('/api/precios/comparar', params={"producto": "yerba"}).status_code, 404)

    def test_optimizar(self):
        resp = self.client.post('/api/precios/optimizar', json={"items": [{"name": "Leche", "quantity": 2}]})
        data = resp.json()["data"]
        self.assertEqual(data["best"]["store"]["id"], "dia")
        self.assertEqual(len(data["stores"]), 5)
        self.assertEqual(self.client.post('/api/precios/optimizar', json={"items": []}).status_code, 422)

    def test_tendencias(self):
        data = self.client.get('/api/precios/tendencias/arroz-1').json()["data"]
        self.assertEqual(len(data["trends"]), 5)
        self.assertAlmostEqual(data["average_price"], 1461)
        self.assertEqual(self.client.get('/api/precios/tendencias/yerba-1').status_code, 404)

    def test_registrar(self):
        resp = self.client.post('/api/precios/registrar', json={"product_id": "arroz-1", "store_id": "dia", "price": 1000})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["data"]["price"], 1000)
        resp = self.client.post('/api/precios/registrar', json={"product_id": "arroz-1", "store_id": "vea", "price": 1000})
        self.assertEqual(resp.status_code, 404)

    def test_alertas_and_ofertas(self):
        resp = self.client.post('/api/precios/alertas', json={"product_id": "arroz-1", "target_price": 2000})
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(resp.json()["data"]["triggered"])
        self.assertEqual(resp.json()["data"]["user_id"], "offline-user")
        self.assertEqual(self.client.get('/api/precios/ofertas').json()["count"], 10)
        self.assertEqual(self.client.get('/api/precios/ofertas', params={"categoria": "verduleria"}).json()["count"], 3)


class TestEventsAPI(ApiTestCase):

    def test_generated_event_is_polled(self):
        with TestClient(app) as client:
            cursor = client.get('/api/events').json()["next_cursor"]
            client.post('/api/shopping-list/generate', json=PLAN)
            events = client.get('/api/events', params={"since": cursor}).json()["events"]
        self.assertEqual([e["type"] for e in events], ["shopping_list.generated"])
        self.assertEqual(events[0]["total_items"], 2)

    def test_health(self):
        self.assertEqual(self.client.get('/health').json(), {"status": "ok"})
