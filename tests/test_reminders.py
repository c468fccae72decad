# -*- coding: utf-8 -*-
"""Tests des rappels SMS planifiés (APScheduler) et de l'envoi SMS simulé."""

import datetime as dt

from agendas.db import MemoryStore
from agendas.repositories import AppointmentRepository
from agendas.scheduler import schedule_all, start_scheduler
from agendas.sms import send_sms

TZ = "Europe/Paris"


def repo_with(*appointments):
    repo = AppointmentRepository(MemoryStore())
    for a in appointments:
        repo.save(a)
    return repo


def appt(days_ahead, **overrides):
    day = dt.date.today() + dt.timedelta(days=days_ahead)
    data = {
        "userId": 1,
        "titre": "Consultation",
        "description": "",
        "date": day.isoformat(),
        "heure": "10:00",
        "duree": 30,
        "location": "",
        "telephone": "+261340000000",
    }
    data.update(overrides)
    return data


def test_future_appointment_gets_two_reminders():
    scheduler = start_scheduler()
    count = schedule_all(repo_with(appt(3)), scheduler, 1440, 60, TZ)
    assert count == 2
    assert sorted(j.id for j in scheduler.get_jobs()) == ["a-1-1", "a-1-24"]


def test_past_cancelled_or_phoneless_are_skipped():
    scheduler = start_scheduler()
    repo = repo_with(
        appt(-2),
        appt(3, statut="annulé"),
        appt(3, telephone=""),
        appt(3, heure="bientôt"),
    )
    assert schedule_all(repo, scheduler, 1440, 60, TZ) == 0
    assert scheduler.get_jobs() == []


def test_rescheduling_replaces_previous_jobs():
    scheduler = start_scheduler()
    repo = repo_with(appt(3))
    schedule_all(repo, scheduler, 1440, 60, TZ)
    repo.update(1, {"statut": "annulé"})
    schedule_all(repo, scheduler, 1440, 60, TZ)
    assert scheduler.get_jobs() == []


def test_simulated_sms_receipt():
    receipt = send_sms("+261340000000", "Rappel")
    assert receipt["success"] is True
    assert receipt["messageId"].startswith("msg_")
    assert receipt["timestamp"].endswith("Z")
