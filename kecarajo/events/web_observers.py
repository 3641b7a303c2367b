"""Web-facing observers for pantry, shopping and price events.

Subscribes to GLOBAL_EVENT_BUS and keeps a bounded in-memory buffer of recent
events that the API exposes at /api/events so clients can poll for alerts.

Each event gets an auto-increment id used as a cursor: clients ask for
`since=<last id seen>` and receive only newer events. The buffer is
per-process and capped at MAX_EVENTS.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    GLOBAL_EVENT_BUS, PANTRY_LOW_STOCK, PANTRY_NEAR_EXPIRY,
    SHOPPING_LIST_GENERATED, PRICE_ALERT_TRIGGERED,
)

logger = logging.getLogger(__name__)

OBSERVED_EVENTS = (PANTRY_LOW_STOCK, PANTRY_NEAR_EXPIRY, SHOPPING_LIST_GENERATED, PRICE_ALERT_TRIGGERED)
MAX_EVENTS = 300

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
_started = False


def _flatten(payload: Any) -> Dict[str, Any]:
    """Reduce a payload to JSON-friendly fields the UI shows."""
    if not isinstance(payload, dict):
        return {}
    out: Dict[str, Any] = {}
    item = payload.get('item')
    if item is not None:
        if isinstance(item, dict):
            for k in ('name', 'unit', 'quantity'):
                if k in item:
                    out[k] = item[k]
        else:
            out['name'] = getattr(item, 'name', '')
            out['unit'] = getattr(item, 'unit', '')
            out['quantity'] = getattr(item, 'quantity', '')
    for k in ('remaining', 'threshold', 'days_left', 'total_items', 'por_categoria', 'alert'):
        if k in payload:
            out[k] = payload[k]
    return out


def _record(event_name: str, payload: Any):
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat(),
        }
        evt.update(_flatten(payload))
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in OBSERVED_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True
    logger.info("Web observers subscribed to %d event types", len(OBSERVED_EVENTS))


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive), or the whole buffer.

    next_cursor is the largest id known so the client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events', 'MAX_EVENTS']
