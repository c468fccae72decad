# -*- coding: utf-8 -*-
"""
Tests du stockage fichier (un tableau JSON par entité).

Couvre :
- création automatique du fichier et du dossier au premier accès,
- relecture après écriture (indentation, UTF-8),
- fichier corrompu -> collection vide, sans exception,
- échec d'écriture -> résultat structuré, fichier intact.
"""

import json

from agendas.db import JsonFileStore, MemoryStore


def test_first_access_creates_file_and_directory(tmp_path):
    path = tmp_path / "nested" / "users.json"
    store = JsonFileStore(str(path))
    assert store.load_all() == []
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_persist_then_load(tmp_path):
    path = tmp_path / "clients.json"
    store = JsonFileStore(str(path))
    records = [{"id": 1, "nom": "Raharison", "notes": "déjà venu"}]
    assert store.persist_all(records).success
    assert store.load_all() == records
    text = path.read_text(encoding="utf-8")
    assert "déjà venu" in text  # pas d'échappement \u
    assert text.startswith("[\n  {")


def test_corrupted_file_reads_as_empty(tmp_path):
    path = tmp_path / "messages.json"
    path.write_text("{ pas du json", encoding="utf-8")
    assert JsonFileStore(str(path)).load_all() == []


def test_non_array_document_reads_as_empty(tmp_path):
    path = tmp_path / "messages.json"
    path.write_text('{"id": 1}', encoding="utf-8")
    assert JsonFileStore(str(path)).load_all() == []


def test_write_failure_is_reported_and_file_untouched(tmp_path):
    path = tmp_path / "users.json"
    store = JsonFileStore(str(path))
    store.persist_all([{"id": 1}])
    before = path.read_bytes()

    res = store.persist_all([{"id": object()}])  # non sérialisable

    assert res.success is False
    assert res.message
    assert path.read_bytes() == before
    assert [p.name for p in tmp_path.iterdir()] == ["users.json"]  # pas de fichier temporaire


def test_memory_store_copies_in_and_out():
    store = MemoryStore([{"id": 1, "nom": "A"}])
    loaded = store.load_all()
    loaded[0]["nom"] = "B"
    assert store.load_all()[0]["nom"] == "A"
    assert store.persist_all(loaded).success
    assert store.writes == 1


def test_memory_store_can_fail_writes():
    store = MemoryStore(fail_writes=True)
    assert store.persist_all([{"id": 1}]).success is False
    assert store.load_all() == []
