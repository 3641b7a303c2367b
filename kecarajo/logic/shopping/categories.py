"""Store-section classification of ingredient names."""
from typing import Iterable, Tuple

from kecarajo.utilities.constants import CATEGORIA_DEFAULT, CATEGORY_KEYWORDS

__all__ = ["detectar_categoria"]


def detectar_categoria(nombre: str, tabla: Iterable[Tuple[str, str]] = CATEGORY_KEYWORDS) -> str:
    """Return the category of the first keyword (in table order) contained in the name.

    Only lower-cases the name; accents are significant here.
    """
    nombre_lower = (nombre or "").lower()
    for keyword, categoria in tabla:
        if keyword in nombre_lower:
            return categoria
    return CATEGORIA_DEFAULT
