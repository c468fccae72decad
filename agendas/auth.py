from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.hash import pbkdf2_sha256

# Stored credentials go through a scheme so users.json can move from the
# historical plaintext format to hashed passwords by configuration alone.
class PlaintextScheme:
    name = "plaintext"

    def hash(self, p: str) -> str:
        return p

    def verify(self, p: str, stored: str) -> bool:
        return p == stored

class Pbkdf2Scheme:
    name = "pbkdf2_sha256"

    def hash(self, p: str) -> str:
        return pbkdf2_sha256.hash(p)

    def verify(self, p: str, stored: str) -> bool:
        try:
            return pbkdf2_sha256.verify(p, stored)
        except (ValueError, TypeError):
            # not a pbkdf2 hash (e.g. a record written before the switch)
            return p == stored

SCHEMES = {s.name: s for s in (PlaintextScheme(), Pbkdf2Scheme())}

def get_scheme(name: str):
    try:
        return SCHEMES[name]
    except KeyError:
        raise ValueError(f"Unknown password scheme: {name}")

def create_access_token(subject: str, secret: str, minutes: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")

def read_access_token(token: str, secret: str) -> Optional[int]:
    try:
        payload = jwt.decode(token, secret, algorithms=["HS256"])
        return int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        return None
