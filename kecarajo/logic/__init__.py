"""Core business logic layer.

Subpackages:
- shopping: shopping list generation from a meal plan minus pantry stock
- pantry: pantry analysis helpers (expiring soon, low stock)
- pricing: supermarket price comparison and price history trends
"""
__all__ = ["shopping", "pantry", "pricing"]
