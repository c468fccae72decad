from fastapi import APIRouter, Depends

from ..broadcaster import MessageInbox
from ..deps import get_inbox, get_messages, unwrap
from ..repositories import MessageRepository

router = APIRouter(prefix="/api/messages", tags=["Messages"])

@router.get("")
@router.get("/", include_in_schema=False)
def list_messages(messages: MessageRepository = Depends(get_messages)):
    return messages.get_all()

@router.put("/{message_id}/mark-read")
async def mark_read(message_id: str, inbox: MessageInbox = Depends(get_inbox)):
    return unwrap(await inbox.mark_read(message_id))

@router.put("/{message_id}/mark-unread")
async def mark_unread(message_id: str, inbox: MessageInbox = Depends(get_inbox)):
    return unwrap(await inbox.mark_unread(message_id))

@router.delete("/{message_id}")
async def delete_message(message_id: str, inbox: MessageInbox = Depends(get_inbox)):
    deleted = unwrap(await inbox.delete(message_id))
    return {"success": True, "deletedMessage": deleted}
