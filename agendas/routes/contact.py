import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from ..broadcaster import MessageInbox
from ..deps import get_inbox, get_settings, unwrap
from ..mailer import attempt_notify
from ..models import ContactIn
from ..settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])

@router.post("")
@router.post("/", include_in_schema=False)
async def send_contact(
    body: ContactIn,
    inbox: MessageInbox = Depends(get_inbox),
    settings: Settings = Depends(get_settings),
):
    data = body.model_dump()
    if not all(data.values()):
        raise HTTPException(400, "Tous les champs sont obligatoires")
    message = unwrap(await inbox.send(data))
    # relay is best effort; the stored message stays whatever happens here
    await run_in_threadpool(attempt_notify, settings, data)
    return {"success": True, "messageId": message["id"]}
