import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..broadcaster import REQUEST_INITIAL_DATA

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

@router.websocket("/ws")
async def inbox_updates(ws: WebSocket):
    inbox = ws.app.state.inbox
    broadcaster = inbox.broadcaster
    await broadcaster.connect(ws)
    try:
        while True:
            frame = await ws.receive_json()
            if isinstance(frame, dict) and frame.get("event") == REQUEST_INITIAL_DATA:
                await inbox.initial_data(ws)
    except WebSocketDisconnect:
        pass
    except (ValueError, KeyError) as e:
        # KeyError: binary frame, starlette reads message["text"]
        logger.warning(f"Trame WebSocket illisible, connexion fermée: {e}")
        await ws.close(code=1003)
    finally:
        broadcaster.disconnect(ws)
