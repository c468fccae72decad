import logging

from fastapi import APIRouter, Depends, HTTPException

from ..auth import create_access_token
from ..deps import current_user, get_settings, get_users, unwrap
from ..logic import password_is_strong
from ..models import (
    ChangePasswordIn,
    LoginIn,
    NotificationSettings,
    PrivacySettings,
    ProfileIn,
    RegisterIn,
    ResetPasswordIn,
    VerifyPasswordIn,
)
from ..repositories import CONFLICT, UserRepository
from ..settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

@router.post("/register", status_code=201)
def register(body: RegisterIn, users: UserRepository = Depends(get_users)):
    data = body.model_dump()
    if not all(data.values()):
        raise HTTPException(400, "Tous les champs sont obligatoires")
    user = unwrap(users.save(data))
    logger.info(f"Nouvel utilisateur {user['id']} inscrit")
    return {"message": "Utilisateur créé avec succès", "user": users.public(user)}

@router.post("/login")
def login(
    body: LoginIn,
    users: UserRepository = Depends(get_users),
    settings: Settings = Depends(get_settings),
):
    if not body.email or not body.password:
        raise HTTPException(400, "Email et mot de passe requis")
    u = users.verify_credentials(body.email, body.password)
    if not u:
        raise HTTPException(401, "Email ou mot de passe erroné")
    token = create_access_token(str(u["id"]), settings.jwt_secret, settings.jwt_expire_minutes)
    return {"message": "Connexion réussie", "user": users.public(u), "token": token}

@router.post("/reset-password")
def reset_password(body: ResetPasswordIn, users: UserRepository = Depends(get_users)):
    if not body.email or not body.newPassword:
        raise HTTPException(400, "Email et nouveau mot de passe requis")
    res = users.update_password(body.email, body.newPassword)
    if res.error == CONFLICT:
        raise HTTPException(400, "Erreur : le nouveau mot de passe est identique à l'ancien. Veuillez en choisir un autre.")
    unwrap(res)
    return {"message": "Mot de passe mis à jour avec succès"}

@router.get("/check-email/{email}")
def check_email(email: str, users: UserRepository = Depends(get_users)):
    return {"exists": users.get_by_email(email) is not None}

@router.get("/profile")
def profile(u: dict = Depends(current_user)):
    return {"user": UserRepository.public(u)}

@router.post("/verify-password")
def verify_password(
    body: VerifyPasswordIn,
    u: dict = Depends(current_user),
    users: UserRepository = Depends(get_users),
):
    if not body.currentPassword:
        raise HTTPException(400, "Mot de passe actuel requis")
    return {"valid": users.scheme.verify(body.currentPassword, u.get("password") or "")}

@router.put("/profile")
def update_profile(
    body: ProfileIn,
    u: dict = Depends(current_user),
    users: UserRepository = Depends(get_users),
):
    # empty strings mean "leave unchanged"
    changes = {k: v for k, v in body.model_dump().items() if v}
    updated = unwrap(users.update(u["id"], changes))
    return {"message": "Profil mis à jour avec succès", "user": users.public(updated)}

@router.put("/change-password")
def change_password(
    body: ChangePasswordIn,
    u: dict = Depends(current_user),
    users: UserRepository = Depends(get_users),
):
    if not body.currentPassword or not body.newPassword:
        raise HTTPException(400, "Mot de passe actuel et nouveau mot de passe requis")
    if not users.scheme.verify(body.currentPassword, u.get("password") or ""):
        raise HTTPException(401, "Mot de passe actuel incorrect")
    if not password_is_strong(body.newPassword):
        raise HTTPException(
            400,
            "Le nouveau mot de passe doit contenir au moins 8 caractères, une majuscule, "
            "une minuscule, un chiffre et un caractère spécial",
        )
    if body.newPassword == body.currentPassword:
        raise HTTPException(400, "Le nouveau mot de passe doit être différent de l'ancien")
    unwrap(users.update_password(u["email"], body.newPassword))
    return {"success": True, "message": "Mot de passe modifié avec succès"}

@router.delete("/profile")
def delete_profile(u: dict = Depends(current_user), users: UserRepository = Depends(get_users)):
    unwrap(users.delete(u["id"]))
    logger.info(f"Compte utilisateur {u['id']} supprimé")
    return {"success": True, "message": "Compte supprimé avec succès"}

# Settings are not persisted yet: reads return defaults, writes are acknowledged.
@router.get("/notification-settings")
def get_notification_settings(u: dict = Depends(current_user)):
    return {"settings": NotificationSettings().model_dump()}

@router.put("/notification-settings")
def put_notification_settings(body: NotificationSettings, u: dict = Depends(current_user)):
    return {"success": True, "message": "Paramètres de notification mis à jour"}

@router.get("/privacy-settings")
def get_privacy_settings(u: dict = Depends(current_user)):
    return {"settings": PrivacySettings().model_dump()}

@router.put("/privacy-settings")
def put_privacy_settings(body: PrivacySettings, u: dict = Depends(current_user)):
    return {"success": True, "message": "Paramètres de confidentialité mis à jour"}
