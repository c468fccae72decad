import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    port: int
    data_dir: str
    uploads_dir: str
    jwt_secret: str
    jwt_expire_minutes: int
    password_scheme: str
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_pass: str
    reminders_enabled: bool
    reminder_24h: int
    reminder_1h: int
    timezone: str
    log_level: str
    cors_origins: list[str]

    @property
    def mail_enabled(self) -> bool:
        # contact messages are always stored; mail relay only with full credentials
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)

def _flag(s: str) -> bool:
    return s.strip().lower() in {"1", "true", "yes", "on"}

def _origins(s: str) -> list[str]:
    return [o.strip() for o in s.split(',') if o.strip()] or ['*']

def load_settings() -> Settings:
    return Settings(
        port=int(os.getenv('PORT', '10000')),
        data_dir=os.getenv('DATA_DIR', 'data'),
        uploads_dir=os.getenv('UPLOADS_DIR', 'uploads'),
        jwt_secret=os.getenv('JWT_SECRET', 'change-me'),
        jwt_expire_minutes=int(os.getenv('JWT_EXPIRE_MINUTES', '43200')),
        password_scheme=os.getenv('PASSWORD_SCHEME', 'plaintext'),
        smtp_host=os.getenv('SMTP_HOST', ''),
        smtp_port=int(os.getenv('SMTP_PORT', '587')),
        smtp_user=os.getenv('SMTP_USER', ''),
        smtp_pass=os.getenv('SMTP_PASS', ''),
        reminders_enabled=_flag(os.getenv('REMINDERS_ENABLED', 'false')),
        reminder_24h=int(os.getenv('REMINDER_24H', '1440')),
        reminder_1h=int(os.getenv('REMINDER_1H', '60')),
        timezone=os.getenv('TIMEZONE', 'Europe/Paris'),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        cors_origins=_origins(os.getenv('CORS_ORIGINS', '*')),
    )
