# -*- coding: utf-8 -*-
"""Fixtures partagées : dépôts sur stores mémoire/fichier et application FastAPI."""

import dataclasses
import datetime as dt
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from agendas.broadcaster import MessageBroadcaster, MessageInbox
from agendas.db import MemoryStore, Stores, open_stores
from agendas.main import create_app
from agendas.repositories import AppointmentRepository, ClientRepository, MessageRepository, UserRepository
from agendas.settings import load_settings

TODAY = dt.date(2024, 5, 20)
NOW = dt.datetime(2024, 5, 20, 9, 30, tzinfo=dt.timezone.utc)


class FakeSocket:
    """Abonné WebSocket minimal : garde les trames reçues."""

    def __init__(self, fail=False):
        self.frames = []
        self.fail = fail

    async def accept(self):
        pass

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket fermée")
        self.frames.append(data)


@dataclass
class Repos:
    stores: Stores
    users: UserRepository
    clients: ClientRepository
    appointments: AppointmentRepository
    messages: MessageRepository


@pytest.fixture
def memory_stores() -> Stores:
    return Stores(users=MemoryStore(), clients=MemoryStore(), appointments=MemoryStore(), messages=MemoryStore())


@pytest.fixture
def repos(memory_stores) -> Repos:
    return Repos(
        stores=memory_stores,
        users=UserRepository(memory_stores.users),
        clients=ClientRepository(memory_stores.clients, today=lambda: TODAY),
        appointments=AppointmentRepository(memory_stores.appointments),
        messages=MessageRepository(memory_stores.messages, clock=lambda: NOW),
    )


@pytest.fixture
def inbox(repos):
    return MessageInbox(repos.messages, MessageBroadcaster())


@pytest.fixture
def settings(tmp_path):
    return dataclasses.replace(
        load_settings(),
        data_dir=str(tmp_path / "data"),
        uploads_dir=str(tmp_path / "uploads"),
        jwt_secret="test-secret",
        password_scheme="plaintext",
        smtp_host="",
        smtp_user="",
        smtp_pass="",
        reminders_enabled=False,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings, open_stores(settings))
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------

USER = {
    "nom": "Rakoto",
    "prenom": "Jean",
    "email": "jean@example.com",
    "password": "Secret1!",
    "genre": "homme",
    "adresse": "1 rue des Lilas",
    "phone": "0341234567",
}


def register_and_login(client, **overrides) -> dict:
    """Inscrit un utilisateur et renvoie les en-têtes Authorization."""
    payload = {**USER, **overrides}
    assert client.post("/api/users/register", json=payload).status_code == 201
    res = client.post("/api/users/login", json={"email": payload["email"], "password": payload["password"]})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
