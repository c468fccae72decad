import logging

from fastapi import APIRouter, Depends, HTTPException

from ..deps import current_user
from ..models import SmsIn
from ..sms import send_sms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sms", tags=["SMS"])

@router.post("/send-sms")
def send_reminder(body: SmsIn, u: dict = Depends(current_user)):
    if not body.phoneNumber or not body.message:
        raise HTTPException(400, "Numéro de téléphone et message requis")
    result = send_sms(body.phoneNumber, body.message)
    if not result["success"]:
        raise HTTPException(500, "Erreur lors de l'envoi du SMS")
    logger.info(f"SMS de rappel envoyé pour le rendez-vous {body.appointmentId}")
    return {
        "success": True,
        "message": "SMS envoyé avec succès",
        "messageId": result["messageId"],
        "timestamp": result["timestamp"],
    }
