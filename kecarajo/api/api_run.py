from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Depends, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from kecarajo.api.dependencies import get_pantry_repository, get_shopping_list_repository
from kecarajo.api.routes import pantry, precios, shopping_lists
from kecarajo.domain.ShoppingList import GeneratedShoppingList
from kecarajo.events.web_observers import start as start_event_observers, get_events as get_web_events
from kecarajo.infra.Pantry_Repository import PantryRepository
from kecarajo.infra.ShoppingList_Repository import ShoppingListRepository
from kecarajo.infra.pdf_utils import generate_pdf_for_shopping_list
from kecarajo.logic.shopping.list_builder import get_shopping_list_generator
from kecarajo.utilities.validators import GenerateShoppingListInput

logger = logging.getLogger("kecarajo_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Register event bus subscribers for web alerts when the app starts."""
    start_event_observers()
    logger.info("Web observers for pantry, shopping and price events started")
    yield


app = FastAPI(title="KeCarajoComer Shopping & Pantry API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pantry.router)
app.include_router(shopping_lists.router)
app.include_router(precios.router)


# -------------------- Helpers --------------------
def _generate(payload: GenerateShoppingListInput, pantry_repo: PantryRepository) -> GeneratedShoppingList:
    pantry_items = [p.model_dump() for p in payload.pantry]
    if payload.use_stored_pantry:
        pantry_items.extend(pantry_repo.load_items())
    return get_shopping_list_generator().generate_from_plan(
        [i.model_dump() for i in payload.ingredients],
        pantry_items,
        payload.recipe_names,
    )


# -------------------- API: Shopping List generation --------------------
@app.post('/api/shopping-list/generate')
def api_generate_shopping_list(payload: GenerateShoppingListInput,
                               pantry_repo: PantryRepository = Depends(get_pantry_repository),
                               lists_repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    lista = _generate(payload, pantry_repo)
    logger.info("ShoppingList GENERATE ingredients=%d pantry=%d -> items=%d",
                len(payload.ingredients), len(payload.pantry), lista.total_items)
    body = lista.to_dict()
    if payload.save_as:
        saved = lists_repo.create_list(payload.save_as, make_active=True)
        saved = lists_repo.add_generated_items(saved['id'], lista.items)
        body['savedListId'] = saved['id']
    return body


@app.post('/api/shopping-list/export')
def api_export_shopping_list(payload: GenerateShoppingListInput,
                             pantry_repo: PantryRepository = Depends(get_pantry_repository)):
    lista = _generate(payload, pantry_repo)
    pdf_bytes = generate_pdf_for_shopping_list(lista)
    filename = f"lista_compras_{lista.fecha_generacion.strftime('%Y%m%d')}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# -------------------- API: Events (polling) --------------------
@app.get('/api/events')
def api_events(since: Optional[int] = Query(default=None, ge=0)):
    return get_web_events(since)


@app.get('/health')
def health():
    return {"status": "ok"}
