from fastapi import Depends, Header, HTTPException, Request

from .auth import read_access_token
from .broadcaster import MessageInbox
from .repositories import CONFLICT, NOT_FOUND, AppointmentRepository, ClientRepository, MessageRepository, Result, UserRepository
from .settings import Settings

STATUS_FOR = {NOT_FOUND: 404, CONFLICT: 400}

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_users(request: Request) -> UserRepository:
    return request.app.state.users

def get_clients(request: Request) -> ClientRepository:
    return request.app.state.clients

def get_appointments(request: Request) -> AppointmentRepository:
    return request.app.state.appointments

def get_messages(request: Request) -> MessageRepository:
    return request.app.state.messages

def get_inbox(request: Request) -> MessageInbox:
    return request.app.state.inbox

def unwrap(result: Result):
    """Return ``result.data`` or raise the HTTP error matching the failure kind."""
    if result.success:
        return result.data
    raise HTTPException(STATUS_FOR.get(result.error, 500), result.message)

# ----------------- Auth helper -----------------
def current_user(
    authorization: str = Header(None),
    settings: Settings = Depends(get_settings),
    users: UserRepository = Depends(get_users),
) -> dict:
    if not authorization:
        raise HTTPException(401, "Authentification requise")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        raise HTTPException(401, "Bearer attendu")
    uid = read_access_token(token, settings.jwt_secret)
    if uid is None:
        raise HTTPException(401, "Token invalide")
    u = users.get_by_id(uid)
    if not u:
        raise HTTPException(401, "Utilisateur non trouvé")
    return u
