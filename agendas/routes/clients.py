import logging

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_clients, unwrap
from ..models import ClientIn
from ..repositories import ClientRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/clients", tags=["Clients"])

@router.get("")
@router.get("/", include_in_schema=False)
def list_clients(clients: ClientRepository = Depends(get_clients)):
    return clients.get_all()

@router.get("/{client_id}")
def get_client(client_id: str, clients: ClientRepository = Depends(get_clients)):
    c = clients.get_by_id(client_id)
    if not c:
        raise HTTPException(404, clients.not_found_message)
    return c

@router.post("")
@router.post("/", include_in_schema=False)
def create_client(body: ClientIn, clients: ClientRepository = Depends(get_clients)):
    if not body.nom or not body.prenom:
        raise HTTPException(400, "Les champs nom et prénom sont obligatoires")
    data = body.model_dump(exclude={"id"})
    c = unwrap(clients.save(data))
    logger.info(f"Client {c['id']} créé")
    return {"success": True, "client": c}

@router.put("/{client_id}")
def update_client(client_id: str, body: ClientIn, clients: ClientRepository = Depends(get_clients)):
    c = unwrap(clients.update(client_id, body.model_dump(exclude_unset=True, exclude={"id"})))
    return {"success": True, "client": c}

@router.delete("/{client_id}")
def delete_client(client_id: str, clients: ClientRepository = Depends(get_clients)):
    unwrap(clients.delete(client_id))
    return {"success": True}
