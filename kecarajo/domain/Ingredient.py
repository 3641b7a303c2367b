"""Meal plan ingredient: one ingredient use from an expanded weekly plan."""
from typing import Any


class MealPlanIngredient:
    __slots__ = ("name", "quantity", "unit")

    def __init__(self, name: str = "", quantity: float = 0, unit: str = ""):
        self.name = name
        self.quantity = quantity
        self.unit = unit

    def __str__(self) -> str:
        return f"{self.name} - {self.quantity} {self.unit}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, MealPlanIngredient):
            return NotImplemented
        return (self.name, self.quantity, self.unit) == (other.name, other.quantity, other.unit)

    @staticmethod
    def from_dict(data: Any) -> "MealPlanIngredient":
        '''Creates a MealPlanIngredient from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return MealPlanIngredient(
            name=d.get("name") or "",
            quantity=d.get("quantity") or 0,
            unit=d.get("unit") or "",
        )

    def to_dict(self) -> dict:
        return {"name": self.name, "quantity": self.quantity, "unit": self.unit}
