"""Unit normalization for shopping list quantities."""
from typing import Tuple

__all__ = ["normalizar_unidad"]


def normalizar_unidad(cantidad: float, unidad: str) -> Tuple[float, str]:
    """Rescale g -> kg and ml -> L once the quantity reaches 1000. Nothing else is converted."""
    unidad_lower = (unidad or "").lower()
    if unidad_lower == "g" and cantidad >= 1000:
        return cantidad / 1000, "kg"
    if unidad_lower == "ml" and cantidad >= 1000:
        return cantidad / 1000, "L"
    return cantidad, unidad
