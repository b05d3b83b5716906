"""
Tiendas Backend — Category Route
==================================

What:  GET /api/categorias, the fixed list of store categories.
Why:   Clients build their category pickers from it. Served from memory;
       no database round trip.
"""

from typing import List

from fastapi import APIRouter

from tiendasapp.models.store import CATEGORIES

router = APIRouter(prefix="/api", tags=["Categories"])


@router.get(
    "/categorias",
    response_model=List[str],
    summary="List store categories",
)
async def list_categories() -> List[str]:
    return list(CATEGORIES)
