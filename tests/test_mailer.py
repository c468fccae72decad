# -*- coding: utf-8 -*-
"""Relais email des messages de contact : jamais d'exception, même en cas d'échec SMTP."""

import dataclasses
import smtplib

from agendas import mailer

CONTACT = {"nom": "Voa", "email": "voa@x.mg", "sujet": "Horaires", "message": "Bonjour\n<b>merci</b>"}


def smtp_settings(settings):
    return dataclasses.replace(settings, smtp_host="smtp.example.com", smtp_user="site@example.com", smtp_pass="pw")


def test_disabled_without_credentials(settings):
    assert settings.mail_enabled is False
    out = mailer.attempt_notify(settings, CONTACT)
    assert out.sent is False


def test_contact_email_layout(settings):
    msg = mailer.build_contact_email(smtp_settings(settings), CONTACT)
    assert msg["Subject"] == "[Contact Riziky-Agendas] Horaires"
    assert msg["To"] == "site@example.com"
    assert msg["Reply-To"] == "voa@x.mg"
    html = msg.get_body(preferencelist=("html",)).get_content()
    assert "&lt;b&gt;merci&lt;/b&gt;" in html
    assert "Bonjour<br>" in html


def test_smtp_failure_is_swallowed(settings, monkeypatch):
    def boom(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "indisponible")

    monkeypatch.setattr(mailer.smtplib, "SMTP", boom)
    out = mailer.attempt_notify(smtp_settings(settings), CONTACT)
    assert out.sent is False
    assert "indisponible" in out.detail


def test_smtp_success(settings, monkeypatch):
    sent = []

    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            self.host, self.port = host, port

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def ehlo(self):
            pass

        def has_extn(self, name):
            return False

        def login(self, user, password):
            pass

        def send_message(self, msg):
            sent.append(msg)

    monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)
    assert mailer.attempt_notify(smtp_settings(settings), CONTACT).sent is True
    assert len(sent) == 1


def test_malformed_reply_to_is_swallowed(settings, monkeypatch):
    monkeypatch.setattr(mailer, "_send", lambda settings, msg: None)
    for email in ("<", '"'):
        out = mailer.attempt_notify(smtp_settings(settings), {**CONTACT, "email": email})
        assert out.sent is False
