"""Fuzzy ingredient name matching used when subtracting pantry stock."""
import unicodedata

__all__ = ["normalizar_nombre", "son_mismo_ingrediente"]


def normalizar_nombre(nombre: str) -> str:
    """Lower-case and strip diacritics (NFD, combining marks removed)."""
    decomposed = unicodedata.normalize("NFD", (nombre or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def son_mismo_ingrediente(nombre1: str, nombre2: str) -> bool:
    """True when the normalized names are equal or one contains the other.

    Deliberately permissive: "pan" matches "pan rallado" and "panadería".
    """
    n1 = normalizar_nombre(nombre1)
    n2 = normalizar_nombre(nombre2)
    if n1 == n2:
        return True
    return n2 in n1 or n1 in n2
