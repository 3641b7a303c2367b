"""Price comparison endpoints (/api/precios)."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from kecarajo.api.dependencies import get_price_tracker
from kecarajo.logic.pricing.price_tracker import PriceTracker, ProductNotFoundError, StoreNotFoundError
from kecarajo.utilities.constants import DEFAULT_MIN_DISCOUNT, DEFAULT_TREND_WINDOW_DAYS
from kecarajo.utilities.validators import BasketInput, PriceAlertInput, PriceRecordInput

router = APIRouter(prefix="/api/precios", tags=["precios"])
logger = logging.getLogger(__name__)


@router.get("/comparar")
def comparar(producto: str = Query(..., min_length=1),
             cantidad: float = Query(default=1, gt=0),
             unidad: Optional[str] = Query(default=None),
             tracker: PriceTracker = Depends(get_price_tracker)):
    comparison = tracker.compare_product_prices(producto, cantidad, unidad)
    if comparison is None:
        raise HTTPException(status_code=404, detail=f"Producto no encontrado: {producto}")
    return {"success": True, "data": comparison}


@router.post("/optimizar")
def optimizar(payload: BasketInput, tracker: PriceTracker = Depends(get_price_tracker)):
    items = [i.model_dump() for i in payload.items]
    comparisons = tracker.compare_basket_prices(items)
    best = comparisons[0] if comparisons else None
    return {"success": True, "data": {"stores": comparisons, "best": best}}


@router.get("/tendencias/{product_id}")
def tendencias(product_id: str, days: int = Query(default=DEFAULT_TREND_WINDOW_DAYS, ge=1, le=365),
               tracker: PriceTracker = Depends(get_price_tracker)):
    try:
        trends = tracker.get_product_price_trends(product_id, days)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail=f"Producto no encontrado: {product_id}")
    return {
        "success": True,
        "data": {
            "trends": trends,
            "average_price": tracker.get_average_price(product_id, days),
        },
    }


@router.post("/registrar", status_code=201)
def registrar(payload: PriceRecordInput, tracker: PriceTracker = Depends(get_price_tracker)):
    try:
        row = tracker.record_price(payload.product_id, payload.store_id, payload.price)
    except (ProductNotFoundError, StoreNotFoundError) as e:
        raise HTTPException(status_code=404, detail=f"No encontrado: {e}")
    logger.info("Price recorded: %s @ %s = %s", payload.product_id, payload.store_id, payload.price)
    return {"success": True, "data": row}


@router.post("/alertas", status_code=201)
def crear_alerta(payload: PriceAlertInput, tracker: PriceTracker = Depends(get_price_tracker)):
    try:
        alert = tracker.create_price_alert(payload.product_id, payload.target_price, payload.user_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail=f"Producto no encontrado: {payload.product_id}")
    return {"success": True, "data": alert}


@router.get("/ofertas")
def ofertas(categoria: Optional[str] = Query(default=None),
            min_descuento: float = Query(default=DEFAULT_MIN_DISCOUNT, ge=0),
            tracker: PriceTracker = Depends(get_price_tracker)):
    deals = tracker.find_deals(categoria, min_descuento)
    return {"success": True, "count": len(deals), "data": deals}
