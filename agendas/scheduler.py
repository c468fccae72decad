import logging
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

from .logic import appointment_start
from .models import DEFAULT_APPOINTMENT_STATUS
from .repositories import AppointmentRepository
from .sms import send_sms

logger = logging.getLogger(__name__)

def start_scheduler():
    return BackgroundScheduler(timezone=timezone.utc)

def schedule_all(appointments: AppointmentRepository, scheduler: BackgroundScheduler, reminder_24h: int, reminder_1h: int, tz_name: str):
    for job in scheduler.get_jobs():
        job.remove()
    now = datetime.now(timezone.utc)
    count = 0
    for a in appointments.get_all():
        if a.get('statut') != DEFAULT_APPOINTMENT_STATUS or not a.get('telephone'):
            continue
        start = appointment_start(a, tz_name)
        if start is None or start <= now:
            continue
        count += _schedule(a, start, scheduler, reminder_24h, reminder_1h, now)
    logger.info(f"{count} rappel(s) SMS planifié(s)")
    return count

def _schedule(a: dict, start: datetime, scheduler: BackgroundScheduler, reminder_24h: int, reminder_1h: int, now: datetime) -> int:
    def msg(prefix: str):
        return f"{prefix}: {a.get('titre') or 'rendez-vous'} le {start.strftime('%d/%m à %H:%M')}."
    added = 0
    t1 = start - timedelta(minutes=reminder_24h)
    if t1 > now:
        scheduler.add_job(send_sms, trigger=DateTrigger(run_date=t1),
                          args=[a['telephone'], msg('Rappel (24h)')],
                          id=f"a-{a['id']}-24", replace_existing=True)
        added += 1
    t2 = start - timedelta(minutes=reminder_1h)
    if t2 > now:
        scheduler.add_job(send_sms, trigger=DateTrigger(run_date=t2),
                          args=[a['telephone'], msg('Rappel (1h)')],
                          id=f"a-{a['id']}-1", replace_existing=True)
        added += 1
    return added
