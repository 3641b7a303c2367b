"""Shopping list entities produced by the generator.

Attribute names follow the app's Spanish vocabulary; `to_dict` keeps the
camelCase keys the frontend already consumes.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from kecarajo.utilities.constants import CATEGORIA_DEFAULT


class ShoppingListItem:
    def __init__(self, nombre: str, cantidad: float, unidad: str,
                 categoria: str = CATEGORIA_DEFAULT, de_plan_semanal: bool = True,
                 recetas_que_lo_usan: Optional[List[str]] = None):
        self.nombre = nombre
        self.cantidad = cantidad
        self.unidad = unidad
        self.categoria = categoria
        self.de_plan_semanal = de_plan_semanal
        self.recetas_que_lo_usan = list(recetas_que_lo_usan) if recetas_que_lo_usan else []

    def __str__(self) -> str:
        return f"{self.nombre} - {self.cantidad} {self.unidad} ({self.categoria})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data: Any) -> "ShoppingListItem":
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingListItem(
            nombre=d.get("nombre") or "",
            cantidad=d.get("cantidad") or 0,
            unidad=d.get("unidad") or "",
            categoria=d.get("categoria") or CATEGORIA_DEFAULT,
            de_plan_semanal=bool(d.get("dePlanSemanal", True)),
            recetas_que_lo_usan=d.get("recetasQueLoUsan") or [],
        )

    def to_dict(self) -> dict:
        return {
            "nombre": self.nombre,
            "cantidad": self.cantidad,
            "unidad": self.unidad,
            "categoria": self.categoria,
            "dePlanSemanal": self.de_plan_semanal,
            "recetasQueLoUsan": list(self.recetas_que_lo_usan),
        }


class GeneratedShoppingList:
    def __init__(self, items: List[ShoppingListItem], fecha_generacion: datetime,
                 desde: datetime, hasta: datetime,
                 por_categoria: Dict[str, List[ShoppingListItem]]):
        self.items = items
        self.fecha_generacion = fecha_generacion
        self.rango_fechas = {"desde": desde, "hasta": hasta}
        self.total_items = len(items)
        self.por_categoria = por_categoria

    def __str__(self) -> str:
        lines = [f"Lista de compras ({self.total_items} items)"]
        for categoria, items in self.por_categoria.items():
            lines.append(f"[{categoria}]")
            lines.extend(f"  - {item.nombre}: {item.cantidad} {item.unidad}" for item in items)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "fechaGeneracion": self.fecha_generacion.isoformat(),
            "rangoFechas": {
                "desde": self.rango_fechas["desde"].isoformat(),
                "hasta": self.rango_fechas["hasta"].isoformat(),
            },
            "totalItems": self.total_items,
            "porCategoria": {
                categoria: [item.to_dict() for item in items]
                for categoria, items in self.por_categoria.items()
            },
        }
