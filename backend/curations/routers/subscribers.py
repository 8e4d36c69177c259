# FILE: curations/routers/subscribers.py
from fastapi import APIRouter, Depends

from .. import schemas
from ..deps import get_subscriber_store, require_admin
from ..stores import SubscriberStore

router = APIRouter(prefix="/api", tags=["subscribers"])


@router.post("/subscribe", response_model=schemas.MessageOut)
def subscribe(
    payload: schemas.SubscribeIn,
    store: SubscriberStore = Depends(get_subscriber_store),
):
    store.subscribe(payload.email)
    return {"message": "Thank you for subscribing!"}


@router.get("/subscribers", response_model=schemas.SubscriberList, dependencies=[Depends(require_admin)])
def list_subscribers(store: SubscriberStore = Depends(get_subscriber_store)):
    emails = store.list()
    return {"count": len(emails), "subscribers": emails}
