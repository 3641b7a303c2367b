"""Price data repository: stores, products, current prices, price history and alerts.

Each collection lives in its own JSON file under the prices directory. The
catalogue and current prices are seeded from constants on first use; history
starts with one row per seeded price.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from kecarajo.infra.json_store import atomic_write_json, load_json
from kecarajo.infra.paths import PRICES_DIR
from kecarajo.utilities.constants import SEED_PRODUCTS, SEED_STORE_FACTORS, SEED_STORES

logger = logging.getLogger(__name__)


def _seed_prices(when: str) -> List[Dict[str, Any]]:
    prices = []
    for product in SEED_PRODUCTS:
        for store in SEED_STORES:
            factor = SEED_STORE_FACTORS.get(store['id'], 1.0)
            prices.append({
                'id': f"{product['id']}-{store['id']}",
                'product_id': product['id'],
                'store_id': store['id'],
                'price': round(product['base_price'] * factor),
                'unit': product['unit'],
                'active': True,
                'updated_at': when,
            })
    return prices


class PriceRepository:
    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else PRICES_DIR
        self._stores_file = self.directory / 'stores.json'
        self._products_file = self.directory / 'products.json'
        self._prices_file = self.directory / 'prices.json'
        self._history_file = self.directory / 'price_history.json'
        self._alerts_file = self.directory / 'alerts.json'
        self._ensure_seeded()

    def _ensure_seeded(self) -> None:
        if self._prices_file.exists():
            return
        when = datetime.now().isoformat()
        prices = _seed_prices(when)
        atomic_write_json(self._stores_file, SEED_STORES)
        atomic_write_json(self._products_file, [
            {k: v for k, v in p.items() if k != 'base_price'} for p in SEED_PRODUCTS
        ])
        atomic_write_json(self._prices_file, prices)
        atomic_write_json(self._history_file, [
            {'product_id': p['product_id'], 'store_id': p['store_id'], 'price': p['price'], 'date': when}
            for p in prices
        ])
        logger.info("Seeded price catalogue in %s (%d prices)", self.directory, len(prices))

    # --- catalogue ---------------------------------------------------------
    def get_stores(self, active_only: bool = True) -> List[Dict[str, Any]]:
        stores = load_json(self._stores_file, [])
        return [s for s in stores if s.get('active', True)] if active_only else stores

    def get_products(self) -> List[Dict[str, Any]]:
        return load_json(self._products_file, [])

    def get_prices(self, product_id: Optional[str] = None) -> List[Dict[str, Any]]:
        prices = [p for p in load_json(self._prices_file, []) if p.get('active', True)]
        if product_id is not None:
            prices = [p for p in prices if p['product_id'] == product_id]
        return prices

    def get_history(self, product_id: str, store_id: Optional[str] = None,
                    since: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """History rows for a product ordered by date, optionally filtered by store and start date."""
        rows = [r for r in load_json(self._history_file, []) if r.get('product_id') == product_id]
        if store_id is not None:
            rows = [r for r in rows if r.get('store_id') == store_id]
        if since is not None:
            rows = [r for r in rows if datetime.fromisoformat(r['date']) >= since]
        return sorted(rows, key=lambda r: r['date'])

    def record_price(self, product_id: str, store_id: str, price: float,
                     when: Optional[datetime] = None) -> Dict[str, Any]:
        """Set the current price for (product, store) and append a history row."""
        stamp = (when or datetime.now()).isoformat()
        prices = load_json(self._prices_file, [])
        current = next((p for p in prices if p['product_id'] == product_id and p['store_id'] == store_id), None)
        if current is None:
            product = next((p for p in self.get_products() if p['id'] == product_id), {})
            current = {
                'id': f"{product_id}-{store_id}",
                'product_id': product_id,
                'store_id': store_id,
                'unit': product.get('unit', 'unidad'),
                'active': True,
            }
            prices.append(current)
        current['price'] = price
        current['updated_at'] = stamp
        atomic_write_json(self._prices_file, prices)

        history = load_json(self._history_file, [])
        history.append({'product_id': product_id, 'store_id': store_id, 'price': price, 'date': stamp})
        atomic_write_json(self._history_file, history)
        return current

    # --- alerts ------------------------------------------------------------
    def get_alerts(self) -> List[Dict[str, Any]]:
        return load_json(self._alerts_file, [])

    def save_alerts(self, alerts: List[Dict[str, Any]]) -> None:
        atomic_write_json(self._alerts_file, alerts)


__all__ = ['PriceRepository']
