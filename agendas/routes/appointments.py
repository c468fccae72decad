import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..deps import current_user, get_appointments, unwrap
from ..models import AppointmentIn
from ..repositories import AppointmentRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])

REQUIRED = ("titre", "date", "heure", "duree")

def _reschedule(request: Request):
    hook = getattr(request.app.state, "reschedule", None)
    if not hook:
        return
    # runs after the write; the saved appointment stands even if this fails
    try:
        hook()
    except Exception:
        logger.exception("Replanification des rappels impossible")

def _owned(appointments: AppointmentRepository, appointment_id: str, u: dict) -> dict:
    # userId is a soft reference; another user's appointment reads as missing
    a = appointments.get_by_id(appointment_id)
    if not a or a.get("userId") != u["id"]:
        raise HTTPException(404, appointments.not_found_message)
    return a

@router.get("")
@router.get("/", include_in_schema=False)
def list_appointments(u: dict = Depends(current_user), appointments: AppointmentRepository = Depends(get_appointments)):
    return appointments.get_by_user_id(u["id"])

@router.get("/week/{start}/{end}")
def week(start: str, end: str, u: dict = Depends(current_user), appointments: AppointmentRepository = Depends(get_appointments)):
    return appointments.get_by_week(start, end, u["id"])

@router.get("/search")
def search(q: str = "", u: dict = Depends(current_user), appointments: AppointmentRepository = Depends(get_appointments)):
    return appointments.search(q, u["id"])

@router.get("/{appointment_id}")
def get_appointment(appointment_id: str, u: dict = Depends(current_user), appointments: AppointmentRepository = Depends(get_appointments)):
    return _owned(appointments, appointment_id, u)

@router.post("", status_code=201)
@router.post("/", status_code=201, include_in_schema=False)
def create_appointment(
    body: AppointmentIn,
    request: Request,
    u: dict = Depends(current_user),
    appointments: AppointmentRepository = Depends(get_appointments),
):
    data = body.model_dump(exclude={"id", "userId"})
    if any(data.get(k) in (None, "") for k in REQUIRED):
        raise HTTPException(400, "Les champs titre, date, heure et durée sont obligatoires")
    # search lowercases these, so they are stored as strings
    data["description"] = data.get("description") or ""
    data["location"] = data.get("location") or ""
    a =unwrap(appointments.save({**data, "userId": u["id"]}))
    logger.info(f"Rendez-vous {a['id']} créé pour l'utilisateur {u['id']}")
    _reschedule(request)
    return a

@router.put("/{appointment_id}")
def update_appointment(
    appointment_id: str,
    body: AppointmentIn,
    request: Request,
    u: dict = Depends(current_user),
    appointments: AppointmentRepository = Depends(get_appointments),
):
    _owned(appointments, appointment_id, u)
    a = unwrap(appointments.update(appointment_id, body.model_dump(exclude_unset=True, exclude={"id", "userId"})))
    _reschedule(request)
    return a

@router.delete("/{appointment_id}")
def delete_appointment(
    appointment_id: str,
    request: Request,
    u: dict = Depends(current_user),
    appointments: AppointmentRepository = Depends(get_appointments),
):
    _owned(appointments, appointment_id, u)
    unwrap(appointments.delete(appointment_id))
    _reschedule(request)
    return {"success": True}
