from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_CLIENT_STATUS = 'actif'
DEFAULT_APPOINTMENT_STATUS = 'validé'
AppointmentStatus = Literal['validé', 'annulé', 'reporté']

# Request bodies keep every field optional: missing fields are reported by the
# routes with the historical French messages instead of pydantic's 422.

class RegisterIn(BaseModel):
    nom: Optional[str] = None
    prenom: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    genre: Optional[str] = None
    adresse: Optional[str] = None
    phone: Optional[str] = None

class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class ResetPasswordIn(BaseModel):
    email: Optional[str] = None
    newPassword: Optional[str] = None

class VerifyPasswordIn(BaseModel):
    currentPassword: Optional[str] = None

class ChangePasswordIn(BaseModel):
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None

class ProfileIn(BaseModel):
    nom: Optional[str] = None
    prenom: Optional[str] = None
    email: Optional[str] = None
    genre: Optional[str] = None
    adresse: Optional[str] = None
    phone: Optional[str] = None

class NotificationSettings(BaseModel):
    emailNotifications: bool = True
    smsNotifications: bool = False
    appointmentReminders: bool = True
    marketingEmails: bool = False

class PrivacySettings(BaseModel):
    profileVisibility: str = 'private'
    showEmail: bool = False
    showPhone: bool = False
    dataSharing: bool = False

class ClientIn(BaseModel):
    model_config = ConfigDict(extra='allow')

    nom: Optional[str] = None
    prenom: Optional[str] = None
    email: Optional[str] = None
    telephone: Optional[str] = None
    adresse: Optional[str] = None
    dateNaissance: Optional[str] = None
    notes: Optional[str] = None
    dateCreation: Optional[str] = None
    derniereVisite: Optional[str] = None
    status: Optional[str] = None
    totalRendezVous: Optional[int] = None

class AppointmentIn(BaseModel):
    model_config = ConfigDict(extra='allow')

    statut: Optional[AppointmentStatus] = None
    nom: Optional[str] = None
    prenom: Optional[str] = None
    dateNaissance: Optional[str] = None
    telephone: Optional[str] = None
    titre: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    heure: Optional[str] = None
    duree: Optional[int] = None
    location: Optional[str] = None

class ContactIn(BaseModel):
    nom: Optional[str] = None
    email: Optional[str] = None
    sujet: Optional[str] = None
    message: Optional[str] = None

class SmsIn(BaseModel):
    phoneNumber: Optional[str] = None
    message: Optional[str] = None
    appointmentId: Optional[int | str] = None
