# FILE: curations/routers/notify.py
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from .. import schemas
from ..deps import get_dispatcher, get_subscriber_store
from ..notifier import Dispatcher
from ..stores import SubscriberStore

router = APIRouter(prefix="/api", tags=["notify"])


@router.post("/notify", response_model=schemas.MessageOut)
async def notify(
    payload: schemas.NotifyIn,
    store: SubscriberStore = Depends(get_subscriber_store),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """
    Sends the same mail to every subscriber and waits for all of them.
    Individual failures only show up in the counts.
    """
    # the SQL store queries the database; keep that off the event loop
    recipients = await run_in_threadpool(store.list)
    result = await dispatcher.dispatch(payload.subject, payload.content, recipients)
    return {"message": result.message}
