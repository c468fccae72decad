"""JSON-backed repositories for users, clients, appointments and messages.

Every write reloads the whole collection from its store, changes it in memory
and hands the full list back to the store. Reads return plain dicts. Writes
return a ``Result`` instead of raising, so the HTTP layer only has to map
``Result.error`` to a status code.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

from .auth import PlaintextScheme
from .logic import (
    SEARCH_MIN_LENGTH,
    count_unread,
    in_range,
    matches_query,
    next_id,
    next_message_id,
    parse_day,
    to_int,
)
from .models import DEFAULT_APPOINTMENT_STATUS, DEFAULT_CLIENT_STATUS

logger = logging.getLogger(__name__)

NOT_FOUND = "not_found"
CONFLICT = "conflict"
STORAGE = "storage"

@dataclass
class Result:
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    data: Any = None

def ok(data=None) -> Result:
    return Result(True, data=data)

def fail(error: str, message: str) -> Result:
    return Result(False, message=message, error=error)

class JsonRepository:
    not_found_message = "Enregistrement non trouvé"
    duplicate_email_message = "Cet email est déjà utilisé"
    unique_email = False

    def __init__(self, store):
        self.store = store

    # ---- helpers ----
    def _key(self, value):
        return to_int(value)

    def _index(self, records: list[dict], key) -> Optional[int]:
        if key is None:
            return None
        return next((i for i, r in enumerate(records) if self._key(r.get("id")) == key), None)

    def _email_taken(self, email, records: list[dict], exclude=None) -> bool:
        return any(r.get("email") == email and self._key(r.get("id")) != exclude for r in records)

    def _new_id(self, records: list[dict]):
        return next_id(records)

    def _build(self, data: dict) -> dict:
        return dict(data)

    def _merge(self, current: dict, data: dict) -> dict:
        merged = {**current, **data}
        merged["id"] = current["id"]
        return merged

    def _persist(self, records: list[dict], data, error_message: str) -> Result:
        res = self.store.persist_all(records)
        if not res.success:
            logger.error(f"{type(self).__name__}: {error_message} ({res.message})")
            return fail(STORAGE, error_message)
        return ok(data)

    def _checks_email(self, email) -> bool:
        return self.unique_email

    # ---- reads ----
    def get_all(self) -> list[dict]:
        return self.store.load_all()

    def get_by_id(self, id) -> Optional[dict]:
        records = self.get_all()
        i = self._index(records, self._key(id))
        return records[i] if i is not None else None

    # ---- writes ----
    def save(self, data: dict) -> Result:
        records = self.get_all()
        email = data.get("email")
        if self._checks_email(email) and self._email_taken(email, records):
            return fail(CONFLICT, self.duplicate_email_message)
        record = {"id": self._new_id(records), **self._build(data)}
        records.append(record)
        return self._persist(records, record, "Erreur lors de l'enregistrement")

    def update(self, id, data: dict) -> Result:
        records = self.get_all()
        key = self._key(id)
        i = self._index(records, key)
        if i is None:
            return fail(NOT_FOUND, self.not_found_message)
        email = data.get("email")
        if email and email != records[i].get("email") and self._checks_email(email):
            if self._email_taken(email, records, exclude=key):
                return fail(CONFLICT, self.duplicate_email_message)
        records[i] = self._merge(records[i], data)
        return self._persist(records, records[i], "Erreur lors de la mise à jour")

    def delete(self, id) -> Result:
        records = self.get_all()
        key = self._key(id)
        kept = [r for r in records if key is None or self._key(r.get("id")) != key]
        if len(kept) == len(records):
            return fail(NOT_FOUND, self.not_found_message)
        removed = next(r for r in records if self._key(r.get("id")) == key)
        return self._persist(kept, removed, "Erreur lors de la suppression")

class UserRepository(JsonRepository):
    not_found_message = "Utilisateur non trouvé"
    unique_email = True
    fields = ("nom", "prenom", "email", "password", "genre", "adresse", "phone")

    def __init__(self, store, scheme=None):
        super().__init__(store)
        self.scheme = scheme or PlaintextScheme()

    @staticmethod
    def public(user: Optional[dict]) -> Optional[dict]:
        if user is None:
            return None
        return {k: v for k, v in user.items() if k != "password"}

    def get_by_email(self, email) -> Optional[dict]:
        return next((u for u in self.get_all() if u.get("email") == email), None)

    def verify_credentials(self, email, password) -> Optional[dict]:
        user = self.get_by_email(email)
        if user and self.scheme.verify(password, user.get("password") or ""):
            return user
        return None

    def _build(self, data: dict) -> dict:
        user = {k: data.get(k) for k in self.fields}
        user["password"] = self.scheme.hash(data.get("password") or "")
        return user

    def _merge(self, current: dict, data: dict) -> dict:
        if "password" in data:
            data = {**data, "password": self.scheme.hash(data["password"])}
        return super()._merge(current, data)

    def update_password(self, email, new_password: str) -> Result:
        users = self.get_all()
        i = next((n for n, u in enumerate(users) if u.get("email") == email), None)
        if i is None:
            return fail(NOT_FOUND, self.not_found_message)
        if self.scheme.verify(new_password, users[i].get("password") or ""):
            return fail(CONFLICT, "Le nouveau mot de passe doit être différent de l'ancien")
        users[i]["password"] = self.scheme.hash(new_password)
        return self._persist(users, None, "Erreur lors de la mise à jour du mot de passe")

class ClientRepository(JsonRepository):
    not_found_message = "Client non trouvé"
    duplicate_email_message = "Cet email est déjà utilisé par un autre client"
    unique_email = True

    def __init__(self, store, today: Callable[[], date] = date.today):
        super().__init__(store)
        self.today = today

    def _checks_email(self, email) -> bool:
        # clients may have no email at all; only real addresses must be unique
        return bool(email)

    def get_by_email(self, email) -> Optional[dict]:
        return next((c for c in self.get_all() if c.get("email") == email), None)

    def _build(self, data: dict) -> dict:
        return {
            "nom": data.get("nom"),
            "prenom": data.get("prenom"),
            "email": data.get("email") or "",
            "telephone": data.get("telephone") or "",
            "adresse": data.get("adresse") or "",
            "dateNaissance": data.get("dateNaissance") or None,
            "notes": data.get("notes") or "",
            "dateCreation": data.get("dateCreation") or self.today().isoformat(),
            "derniereVisite": data.get("derniereVisite") or None,
            "status": data.get("status") or DEFAULT_CLIENT_STATUS,
            "totalRendezVous": data.get("totalRendezVous") or 0,
        }

class AppointmentRepository(JsonRepository):
    not_found_message = "Rendez-vous non trouvé"

    def get_by_user_id(self, user_id) -> list[dict]:
        uid = to_int(user_id)
        return [a for a in self.get_all() if a.get("userId") == uid]

    def get_by_week(self, start, end, user_id=None) -> list[dict]:
        first, last = parse_day(start), parse_day(end)
        if first is None or last is None:
            return []
        uid = to_int(user_id) if user_id is not None else None
        return [
            a for a in self.get_all()
            if in_range(parse_day(a.get("date")), first, last)
            and (uid is None or a.get("userId") == uid)
        ]

    def search(self, query, user_id=None) -> list[dict]:
        if not query or len(query) < SEARCH_MIN_LENGTH:
            return []
        uid = to_int(user_id) if user_id is not None else None
        return [
            a for a in self.get_all()
            if matches_query(a, query) and (uid is None or a.get("userId") == uid)
        ]

    def _build(self, data: dict) -> dict:
        return {
            "userId": to_int(data.get("userId")),
            "statut": data.get("statut") or DEFAULT_APPOINTMENT_STATUS,
            "nom": data.get("nom") or "",
            "prenom": data.get("prenom") or "",
            "dateNaissance": data.get("dateNaissance") or "",
            "telephone": data.get("telephone") or "",
            "titre": data.get("titre"),
            "description": data.get("description"),
            "date": data.get("date"),
            "heure": data.get("heure"),
            "duree": to_int(data.get("duree")),
            "location": data.get("location"),
        }

    def _merge(self, current: dict, data: dict) -> dict:
        merged = super()._merge(current, data)
        merged["userId"] = to_int(data.get("userId") or current.get("userId"))
        merged["duree"] = to_int(data.get("duree") or current.get("duree"))
        merged["statut"] = data.get("statut") or current.get("statut")
        return merged

class MessageRepository(JsonRepository):
    """Contact messages; ids are creation timestamps in milliseconds, kept as strings."""

    not_found_message = "Message non trouvé"

    def __init__(self, store, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        super().__init__(store)
        self.clock = clock

    def _key(self, value):
        return None if value is None else str(value)

    def _new_id(self, records: list[dict]) -> str:
        return next_message_id(records, int(self.clock().timestamp() * 1000))

    def _build(self, data: dict) -> dict:
        sent = self.clock().astimezone(timezone.utc)
        return {
            "nom": data.get("nom"),
            "email": data.get("email"),
            "sujet": data.get("sujet"),
            "message": data.get("message"),
            "dateEnvoi": sent.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "lu": False,
        }

    def set_read(self, id, lu: bool) -> Result:
        messages = self.get_all()
        i = self._index(messages, self._key(id))
        if i is None:
            return fail(NOT_FOUND, self.not_found_message)
        messages[i]["lu"] = lu
        return self._persist(messages, messages[i], "Erreur lors de la mise à jour du message")

    def unread_count(self) -> int:
        return count_unread(self.get_all())
