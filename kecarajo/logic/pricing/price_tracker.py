"""Price tracker: compares supermarket prices and summarizes price history.

Results are plain dicts ready to be returned by the API.
"""
from __future__ import annotations
import logging
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import uuid4

from kecarajo.events.event_helpers import publish_price_alert
from kecarajo.logic.shopping.matching import normalizar_nombre
from kecarajo.utilities.constants import (
    DEFAULT_MIN_DISCOUNT,
    DEFAULT_TREND_WINDOW_DAYS,
    FORECAST_DAYS_AHEAD,
    TREND_THRESHOLD_PERCENT,
    UNIT_CONVERSIONS,
)

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9\s]')

__all__ = ['PriceTracker', 'ProductNotFoundError', 'StoreNotFoundError', 'normalize_product_name',
           'calculate_adjusted_price', 'calculate_price_forecast']


class ProductNotFoundError(LookupError):
    pass


class StoreNotFoundError(LookupError):
    pass


def normalize_product_name(name: str) -> str:
    return _NON_ALNUM.sub('', normalizar_nombre(name)).strip()


def calculate_adjusted_price(price: float, price_unit: str, quantity: float,
                             unit: Optional[str] = None) -> float:
    """Cost of `quantity` `unit` of a product priced per `price_unit`.

    The quantity is converted into the price unit when the pair is known;
    otherwise it is used as-is.
    """
    if unit and unit != price_unit:
        factor = UNIT_CONVERSIONS.get((unit, price_unit))
        if factor is None:
            inverse = UNIT_CONVERSIONS.get((price_unit, unit))
            factor = 1 / inverse if inverse else None
        if factor is not None:
            return price * quantity * factor
    return price * quantity


def calculate_price_forecast(prices: List[float]) -> Optional[Dict[str, float]]:
    """Least-squares line over the series; value FORECAST_DAYS_AHEAD after the last point.

    Needs at least 3 points. Confidence is R² clamped to [0, 1].
    """
    n = len(prices)
    if n < 3:
        return None
    xs = range(n)
    sum_x = sum(xs)
    sum_y = sum(prices)
    sum_xy = sum(x * y for x, y in zip(xs, prices))
    sum_x2 = sum(x * x for x in xs)

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    next_week = intercept + slope * (n + FORECAST_DAYS_AHEAD)

    y_mean = sum_y / n
    ss_total = sum((y - y_mean) ** 2 for y in prices)
    ss_residual = sum((y - (intercept + slope * x)) ** 2 for x, y in zip(xs, prices))
    r_squared = 1.0 if ss_total == 0 else 1 - ss_residual / ss_total

    return {
        'next_week': max(0.0, next_week),
        'confidence': max(0.0, min(1.0, r_squared)),
    }


def _trend(change_percentage: float) -> str:
    if change_percentage > TREND_THRESHOLD_PERCENT:
        return 'increasing'
    if change_percentage < -TREND_THRESHOLD_PERCENT:
        return 'decreasing'
    return 'stable'


class PriceTracker:
    def __init__(self, repository):
        self.repository = repository

    def _stores_by_id(self) -> Dict[str, Dict[str, Any]]:
        return {s['id']: s for s in self.repository.get_stores()}

    def find_product(self, name: str) -> Optional[Dict[str, Any]]:
        normalized = normalize_product_name(name)
        if not normalized:
            return None
        for product in self.repository.get_products():
            candidate = product['normalized_name']
            if normalized in candidate or candidate in normalized:
                return product
        return None

    def get_product(self, product_id: str) -> Dict[str, Any]:
        for product in self.repository.get_products():
            if product['id'] == product_id:
                return product
        raise ProductNotFoundError(product_id)

    # --- comparisons -------------------------------------------------------
    def compare_product_prices(self, product_name: str, quantity: float = 1,
                               unit: Optional[str] = None) -> Optional[Dict[str, Any]]:
        product = self.find_product(product_name)
        if product is None:
            logger.warning("Product not found: %s", product_name)
            return None
        return self._compare(product, quantity, unit)

    def _compare(self, product: Dict[str, Any], quantity: float,
                 unit: Optional[str]) -> Optional[Dict[str, Any]]:
        stores = self._stores_by_id()
        rows = []
        for price in self.repository.get_prices(product['id']):
            store = stores.get(price['store_id'])
            if store is None:
                continue
            rows.append({
                'price_id': price['id'],
                'store': store,
                'price': price['price'],
                'unit': price['unit'],
                'adjusted_price': calculate_adjusted_price(price['price'], price['unit'], quantity, unit),
            })
        if not rows:
            return None

        rows.sort(key=lambda r: r['adjusted_price'])
        lowest, highest = rows[0], rows[-1]
        average = sum(r['adjusted_price'] for r in rows) / len(rows)
        savings_amount = highest['adjusted_price'] - lowest['adjusted_price']
        savings_pct = (savings_amount / highest['adjusted_price'] * 100) if highest['adjusted_price'] else 0.0

        return {
            'product': product,
            'prices': rows,
            'lowest_price': {'price': lowest['adjusted_price'], 'store': lowest['store'], 'price_id': lowest['price_id']},
            'highest_price': {'price': highest['adjusted_price'], 'store': highest['store'], 'price_id': highest['price_id']},
            'average_price': average,
            'price_range': {'min': lowest['adjusted_price'], 'max': highest['adjusted_price']},
            'savings': {'amount': savings_amount, 'percentage': savings_pct},
        }

    def compare_basket_prices(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Total cost of the basket at each store, cheapest first.

        Items are {name, quantity, unit?}. Items without a price at a store are
        reported in that store's missing_items.
        """
        prices = self.repository.get_prices()
        resolved = [(item, self.find_product(item.get('name', ''))) for item in items]

        comparisons = []
        for store in self.repository.get_stores():
            breakdown, missing = [], []
            total = 0.0
            for item, product in resolved:
                price = None
                if product is not None:
                    price = next((p for p in prices
                                  if p['product_id'] == product['id'] and p['store_id'] == store['id']), None)
                if price is None:
                    missing.append(item.get('name', ''))
                    continue
                adjusted = calculate_adjusted_price(price['price'], price['unit'],
                                                    item.get('quantity', 1) or 1, item.get('unit'))
                total += adjusted
                breakdown.append({
                    'product_id': product['id'],
                    'product_name': product['name'],
                    'price': adjusted,
                    'unit': price['unit'],
                })
            comparisons.append({
                'store': store,
                'total_items': len(items) - len(missing),
                'total_price': total,
                'savings': 0.0,
                'savings_percentage': 0.0,
                'missing_items': missing,
                'price_breakdown': breakdown,
            })

        if comparisons:
            max_price = max(c['total_price'] for c in comparisons)
            for c in comparisons:
                c['savings'] = max_price - c['total_price']
                c['savings_percentage'] = (c['savings'] / max_price * 100) if max_price > 0 else 0.0

        return sorted(comparisons, key=lambda c: c['total_price'])

    # --- history -----------------------------------------------------------
    def get_product_price_trends(self, product_id: str,
                                 days: int = DEFAULT_TREND_WINDOW_DAYS) -> List[Dict[str, Any]]:
        self.get_product(product_id)
        since = datetime.now() - timedelta(days=days)
        current = {p['store_id']: p for p in self.repository.get_prices(product_id)}

        trends = []
        for store in self.repository.get_stores():
            rows = self.repository.get_history(product_id, store['id'], since)
            points = [{'price': r['price'], 'date': r['date']} for r in rows]
            if not points and store['id'] in current:
                cp = current[store['id']]
                points = [{'price': cp['price'], 'date': cp.get('updated_at', '')}]
            if not points:
                continue
            first, last = points[0]['price'], points[-1]['price']
            change = ((last - first) / first * 100) if first else 0.0
            trends.append({
                'product_id': product_id,
                'store_id': store['id'],
                'prices': points,
                'trend': _trend(change),
                'change_percentage': change,
                'forecast': calculate_price_forecast([p['price'] for p in points]),
            })
        return trends

    def get_average_price(self, product_id: str, days: int = DEFAULT_TREND_WINDOW_DAYS) -> Optional[float]:
        since = datetime.now() - timedelta(days=days)
        rows = self.repository.get_history(product_id, since=since)
        if not rows:
            return None
        return sum(r['price'] for r in rows) / len(rows)

    def record_price(self, product_id: str, store_id: str, price: float,
                     when: Optional[datetime] = None) -> Dict[str, Any]:
        self.get_product(product_id)
        if store_id not in self._stores_by_id():
            raise StoreNotFoundError(store_id)
        row = self.repository.record_price(product_id, store_id, price, when)
        self.check_alerts()
        return row

    # --- alerts ------------------------------------------------------------
    def _lowest_price(self, product_id: str) -> Optional[float]:
        prices = [p['price'] for p in self.repository.get_prices(product_id)]
        return min(prices) if prices else None

    def create_price_alert(self, product_id: str, target_price: float, user_id: str) -> Dict[str, Any]:
        self.get_product(product_id)
        current = self._lowest_price(product_id)
        alert = {
            'id': f"alert_{uuid4().hex}",
            'product_id': product_id,
            'user_id': user_id,
            'target_price': target_price,
            'current_price': current,
            'triggered': current is not None and current <= target_price,
            'created_at': datetime.now().isoformat(),
        }
        alerts = self.repository.get_alerts()
        alerts.append(alert)
        self.repository.save_alerts(alerts)
        logger.info("Price alert created for product %s (target %s)", product_id, target_price)
        if alert['triggered']:
            publish_price_alert(alert)
        return alert

    def check_alerts(self) -> List[Dict[str, Any]]:
        """Refresh current prices on pending alerts; returns the ones that just triggered."""
        alerts = self.repository.get_alerts()
        fired = []
        for alert in alerts:
            if alert.get('triggered'):
                continue
            current = self._lowest_price(alert['product_id'])
            alert['current_price'] = current
            if current is not None and current <= alert['target_price']:
                alert['triggered'] = True
                fired.append(alert)
        self.repository.save_alerts(alerts)
        for alert in fired:
            publish_price_alert(alert)
        return fired

    def find_deals(self, category: Optional[str] = None,
                   min_discount: float = DEFAULT_MIN_DISCOUNT) -> List[Dict[str, Any]]:
        products = self.repository.get_products()
        if category:
            products = [p for p in products if p.get('category') == category]
        deals = []
        for product in products:
            comparison = self._compare(product, 1, None)
            if comparison and comparison['savings']['percentage'] >= min_discount:
                deals.append(comparison)
        return sorted(deals, key=lambda d: d['savings']['percentage'], reverse=True)
