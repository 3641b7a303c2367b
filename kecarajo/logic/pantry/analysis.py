"""Pantry analysis helpers over pantry item dicts (as stored by PantryRepository)."""
from __future__ import annotations
from datetime import date as _date
from typing import List, Dict, Any, Optional

from kecarajo.domain.Pantry import parse_date
from kecarajo.utilities.constants import DATE_FORMAT, LOW_STOCK_THRESHOLD, DAYS_BEFORE_EXPIRY

__all__ = ["compute_expiring_soon", "compute_low_stock", "compute_pantry_snapshots"]


def compute_expiring_soon(items: List[Dict[str, Any]], *, window: int | None = None,
                          today: Optional[_date] = None) -> List[Dict[str, Any]]:
    """Return items expiring in <= window days (including already expired)."""
    expiring_window = window if window is not None else DAYS_BEFORE_EXPIRY
    today = today or _date.today()
    result: List[Dict[str, Any]] = []
    for item in items:
        exp_date = parse_date(item.get('expiresAt'))
        if exp_date is None:
            continue
        days_left = (exp_date - today).days
        if days_left <= expiring_window:
            result.append({
                'name': item.get('name', ''),
                'quantity': item.get('quantity', ''),
                'unit': item.get('unit', ''),
                'exp': exp_date.strftime(DATE_FORMAT),
                'days_left': days_left,
                'category': item.get('category', ''),
            })
    result.sort(key=lambda x: (x['days_left'], x['name']))
    return result


def compute_low_stock(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return items whose stock is at or below the LOW_STOCK_THRESHOLD for their unit."""
    low: List[Dict[str, Any]] = []
    for item in items:
        try:
            q = float(item.get('quantity') or 0)
        except (TypeError, ValueError):
            q = 0.0
        unit = item.get('unit', '')
        th = LOW_STOCK_THRESHOLD.get(unit, 0)
        if th > 0 and q <= th:
            low.append({
                'name': item.get('name', ''),
                'quantity': q,
                'unit': unit,
                'threshold': th,
                'category': item.get('category', ''),
            })
    low.sort(key=lambda x: (x['quantity'], x['name']))
    return low


def compute_pantry_snapshots(items: List[Dict[str, Any]], *, window: int | None = None):
    return compute_expiring_soon(items, window=window), compute_low_stock(items)
