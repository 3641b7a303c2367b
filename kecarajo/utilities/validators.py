"""
Request body schemas (Pydantic) for the HTTP API.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from kecarajo.utilities.constants import CATEGORIAS


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


class MealPlanIngredientInput(BaseModel):
    """One ingredient use from the expanded weekly plan."""
    name: str = Field(..., min_length=1, max_length=100)
    quantity: float = Field(..., ge=0)
    unit: str = Field("", max_length=20)

    @field_validator('name', 'unit', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        return _strip(v)


class _PantryFields(BaseModel):
    """Validators shared by pantry create and update bodies."""

    @field_validator('name', 'unit', mode='before', check_fields=False)
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)

    @field_validator('category', check_fields=False)
    @classmethod
    def validate_category(cls, v):
        if v is not None and v not in CATEGORIAS:
            raise ValueError(f"category must be one of {', '.join(CATEGORIAS)}")
        return v


class PantryItemInput(_PantryFields):
    name: str = Field(..., min_length=1, max_length=100)
    quantity: float = Field(1, ge=0)
    unit: str = Field("unidades", max_length=20)
    expiresAt: Optional[str] = None
    category: Optional[str] = None


class PantryItemUpdate(_PantryFields):
    """Partial update. Only fields present in the body are applied; null clears expiresAt or category."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=20)
    expiresAt: Optional[str] = None
    category: Optional[str] = None

    @field_validator('name', 'quantity', 'unit')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class GenerateShoppingListInput(BaseModel):
    """Body of POST /api/shopping-list/generate."""
    ingredients: List[MealPlanIngredientInput] = Field(default_factory=list)
    pantry: List[PantryItemInput] = Field(default_factory=list)
    recipe_names: Optional[List[str]] = None
    use_stored_pantry: bool = False
    save_as: Optional[str] = Field(None, min_length=1, max_length=100)


class ShoppingListCreateInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    is_active: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('List name cannot be empty')
        return v.strip()


class ShoppingListUpdateInput(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class ShoppingItemInput(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=100)
    cantidad: float = Field(1, gt=0)
    unidad: str = Field("unidades", max_length=20)
    categoria: Optional[str] = None

    @field_validator('categoria')
    @classmethod
    def validate_categoria(cls, v):
        if v is not None and v not in CATEGORIAS:
            raise ValueError(f"categoria must be one of {', '.join(CATEGORIAS)}")
        return v


class BasketItemInput(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(1, gt=0)
    unit: Optional[str] = None


class BasketInput(BaseModel):
    items: List[BasketItemInput]

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        if not v:
            raise ValueError('At least one item is required')
        return v


class PriceRecordInput(BaseModel):
    product_id: str = Field(..., min_length=1)
    store_id: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)


class PriceAlertInput(BaseModel):
    product_id: str = Field(..., min_length=1)
    target_price: float = Field(..., gt=0)
    user_id: str = Field("offline-user", min_length=1)
