# Relay of contact messages by email. Best effort: never raises, and a failure
# here never undoes the stored message.
import html
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from .settings import Settings

logger = logging.getLogger(__name__)

@dataclass
class MailOutcome:
    sent: bool
    detail: Optional[str] = None

def build_contact_email(settings: Settings, contact: dict) -> EmailMessage:
    nom, email = contact.get("nom") or "", contact.get("email") or ""
    sujet, body = contact.get("sujet") or "", contact.get("message") or ""
    msg = EmailMessage()
    # the site mailbox is both sender and recipient; the visitor goes in Reply-To
    msg["From"] = f'"{nom}" <{settings.smtp_user}>'
    msg["To"] = settings.smtp_user
    msg["Reply-To"] = email
    msg["Subject"] = f"[Contact Riziky-Agendas] {sujet}"
    msg.set_content(f"Message de: {nom} ({email})\n\n{body}")
    msg.add_alternative(
        "<h2>Nouveau message de contact</h2>"
        f"<p><strong>De:</strong> {html.escape(nom)}</p>"
        f"<p><strong>Email:</strong> {html.escape(email)}</p>"
        f"<p><strong>Sujet:</strong> {html.escape(sujet)}</p>"
        '<div style="margin-top: 20px; padding: 15px; border-left: 4px solid #ccc;">'
        f"<p>{html.escape(body).replace(chr(10), '<br>')}</p></div>",
        subtype="html",
    )
    return msg

def _send(settings: Settings, msg: EmailMessage):
    if settings.smtp_port == 465:
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=ssl.create_default_context(), timeout=20) as s:
            s.login(settings.smtp_user, settings.smtp_pass)
            s.send_message(msg)
        return
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=20) as s:
        s.ehlo()
        if s.has_extn("starttls"):
            s.starttls(context=ssl.create_default_context())
            s.ehlo()
        s.login(settings.smtp_user, settings.smtp_pass)
        s.send_message(msg)

def attempt_notify(settings: Settings, contact: dict) -> MailOutcome:
    if not settings.mail_enabled:
        logger.info("Configuration SMTP manquante, message sauvegardé uniquement")
        return MailOutcome(False, "smtp not configured")
    try:
        msg = build_contact_email(settings, contact)
        _send(settings, msg)
    except Exception as e:
        # the visitor email reaches Reply-To unvalidated
        logger.exception(f"Envoi de l'email de contact impossible: {e}")
        return MailOutcome(False, str(e))
    logger.info(f"Message de contact relayé par email à {settings.smtp_user}")
    return MailOutcome(True)
