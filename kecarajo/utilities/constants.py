from typing import Final

from kecarajo.utilities.config import (
    DAYS_BEFORE_EXPIRY,
    LOW_STOCK_THRESHOLD,
    PLANNING_HORIZON_DAYS,
)

DATE_FORMAT: Final[str] = "%d-%m-%Y"

CATEGORIAS: Final[tuple[str, ...]] = (
    "verduleria", "carniceria", "almacen", "panaderia", "lacteos", "limpieza", "otros",
)
CATEGORIA_DEFAULT: Final[str] = "otros"

# Order matters: the first keyword found in the name wins.
CATEGORY_KEYWORDS: Final[tuple[tuple[str, str], ...]] = (
    # Verdulería
    ("tomate", "verduleria"),
    ("cebolla", "verduleria"),
    ("ajo", "verduleria"),
    ("papa", "verduleria"),
    ("zanahoria", "verduleria"),
    ("lechuga", "verduleria"),
    ("perejil", "verduleria"),
    ("limón", "verduleria"),
    ("pimiento", "verduleria"),
    ("zapallo", "verduleria"),
    ("manzana", "verduleria"),
    ("banana", "verduleria"),
    ("naranja", "verduleria"),
    # Carnicería
    ("carne", "carniceria"),
    ("pollo", "carniceria"),
    ("cerdo", "carniceria"),
    ("pescado", "carniceria"),
    ("milanesa", "carniceria"),
    ("asado", "carniceria"),
    ("bife", "carniceria"),
    ("molida", "carniceria"),
    ("chorizo", "carniceria"),
    # Lácteos
    ("leche", "lacteos"),
    ("queso", "lacteos"),
    ("yogur", "lacteos"),
    ("manteca", "lacteos"),
    ("crema", "lacteos"),
    ("huevos", "lacteos"),
    # Panadería
    ("pan", "panaderia"),
    ("facturas", "panaderia"),
    ("medialunas", "panaderia"),
    ("galletitas", "panaderia"),
    # Almacén
    ("arroz", "almacen"),
    ("fideos", "almacen"),
    ("aceite", "almacen"),
    ("azúcar", "almacen"),
    ("harina", "almacen"),
    ("sal", "almacen"),
    ("yerba", "almacen"),
    ("café", "almacen"),
    ("té", "almacen"),
    ("lata", "almacen"),
    ("conserva", "almacen"),
)

# Price tracker
TREND_THRESHOLD_PERCENT: Final[float] = 5.0
FORECAST_DAYS_AHEAD: Final[int] = 7
DEFAULT_TREND_WINDOW_DAYS: Final[int] = 30
DEFAULT_MIN_DISCOUNT: Final[float] = 10.0

UNIT_CONVERSIONS: Final[dict[tuple[str, str], float]] = {
    ("g", "kg"): 0.001,
    ("kg", "g"): 1000.0,
    ("lb", "kg"): 0.453592,
    ("oz", "g"): 28.3495,
    ("ml", "L"): 0.001,
    ("L", "ml"): 1000.0,
    ("gal", "L"): 3.78541,
    ("fl_oz", "ml"): 29.5735,
}

SEED_STORES: Final[list[dict]] = [
    {"id": "carrefour", "name": "Carrefour", "active": True, "location": "CABA"},
    {"id": "coto", "name": "Coto", "active": True, "location": "CABA"},
    {"id": "dia", "name": "Día", "active": True, "location": "CABA"},
    {"id": "jumbo", "name": "Jumbo", "active": True, "location": "CABA"},
    {"id": "changomas", "name": "Changomas", "active": True, "location": "GBA"},
]

# Store price level relative to the base price of each product
SEED_STORE_FACTORS: Final[dict[str, float]] = {
    "carrefour": 1.00,
    "coto": 0.95,
    "dia": 0.88,
    "jumbo": 1.12,
    "changomas": 0.92,
}

SEED_PRODUCTS: Final[list[dict]] = [
    {"id": "leche-1", "name": "Leche Entera 1L", "normalized_name": "leche entera", "category": "lacteos", "unit": "L", "base_price": 950},
    {"id": "pan-1", "name": "Pan Lactal", "normalized_name": "pan lactal", "category": "panaderia", "unit": "unidad", "base_price": 1200},
    {"id": "huevos-1", "name": "Huevos x12", "normalized_name": "huevos", "category": "lacteos", "unit": "docena", "base_price": 2800},
    {"id": "arroz-1", "name": "Arroz Largo Fino 1kg", "normalized_name": "arroz", "category": "almacen", "unit": "kg", "base_price": 1500},
    {"id": "aceite-1", "name": "Aceite Girasol 1.5L", "normalized_name": "aceite girasol", "category": "almacen", "unit": "L", "base_price": 3200},
    {"id": "carne-1", "name": "Carne Picada", "normalized_name": "carne picada", "category": "carniceria", "unit": "kg", "base_price": 5500},
    {"id": "pollo-1", "name": "Pechuga de Pollo", "normalized_name": "pechuga pollo", "category": "carniceria", "unit": "kg", "base_price": 4200},
    {"id": "tomate-1", "name": "Tomate Redondo", "normalized_name": "tomate", "category": "verduleria", "unit": "kg", "base_price": 1800},
    {"id": "cebolla-1", "name": "Cebolla", "normalized_name": "cebolla", "category": "verduleria", "unit": "kg", "base_price": 900},
    {"id": "papa-1", "name": "Papa", "normalized_name": "papa", "category": "verduleria", "unit": "kg", "base_price": 700},
]

__all__ = [
    "DATE_FORMAT", "DAYS_BEFORE_EXPIRY", "LOW_STOCK_THRESHOLD", "PLANNING_HORIZON_DAYS",
    "CATEGORIAS", "CATEGORIA_DEFAULT", "CATEGORY_KEYWORDS",
    "TREND_THRESHOLD_PERCENT", "FORECAST_DAYS_AHEAD", "DEFAULT_TREND_WINDOW_DAYS",
    "DEFAULT_MIN_DISCOUNT", "UNIT_CONVERSIONS",
    "SEED_STORES", "SEED_STORE_FACTORS", "SEED_PRODUCTS",
]
