# FILE: curations/routers/affiliates.py
from typing import List

from fastapi import APIRouter, Depends

from .. import schemas
from ..deps import get_affiliate_store, require_admin
from ..errors import NotFound
from ..stores import AffiliateStore

router = APIRouter(prefix="/api/affiliates", tags=["affiliates"])


@router.get("", response_model=List[schemas.AffiliateOut])
def list_affiliates(store: AffiliateStore = Depends(get_affiliate_store)):
    return store.list()


# -------------------- create / update --------------------
@router.post("", response_model=schemas.AffiliateSaved, dependencies=[Depends(require_admin)])
def save_affiliate(
    payload: schemas.AffiliateIn,
    store: AffiliateStore = Depends(get_affiliate_store),
):
    """
    Without id: create (id = current max + 1).
    With id: replace that record in place, 404 if it does not exist.
    """
    saved = store.upsert(payload.model_dump())
    verb = "updated" if payload.id is not None else "created"
    return {"message": f"Affiliate {verb}.", "affiliate": saved}


# -------------------- delete --------------------
@router.delete("/{affiliate_id}", response_model=schemas.MessageOut, dependencies=[Depends(require_admin)])
def delete_affiliate(
    affiliate_id: str,
    store: AffiliateStore = Depends(get_affiliate_store),
):
    # any id that is not a stored integer id is simply unknown
    try:
        key = int(affiliate_id)
    except ValueError:
        raise NotFound("Affiliate not found.") from None
    store.remove(key)
    return {"message": "Affiliate deleted."}
