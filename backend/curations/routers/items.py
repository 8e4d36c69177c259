# FILE: curations/routers/items.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..catalog import Catalog
from ..constants.categories import CATEGORIES
from ..deps import get_catalog

router = APIRouter(prefix="/api", tags=["catalog"])


# -------------------- list --------------------
@router.get("/items", response_model=List[schemas.ItemOut])
def list_items(
    category: Optional[str] = Query(None, description="clothing / accessories / home"),
    catalog: Catalog = Depends(get_catalog),
):
    return [it.to_dict() for it in catalog.by_category(category)]


# -------------------- categories --------------------
@router.get("/categories", response_model=List[schemas.CategoryOut])
def list_categories(catalog: Catalog = Depends(get_catalog)):
    grouped = catalog.categories()
    return [
        schemas.CategoryOut(key=c["key"], label=c["label"], count=len(grouped.get(c["key"], [])))
        for c in CATEGORIES
    ]


# -------------------- search --------------------
@router.get("/search", response_model=List[schemas.ItemOut])
def search_items(
    q: Optional[str] = Query(None, description="substring of name/description"),
    catalog: Catalog = Depends(get_catalog),
):
    return [it.to_dict() for it in catalog.search(q)]
