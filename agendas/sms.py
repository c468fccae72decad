import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

def send_sms(phone_number: str, message: str) -> dict:
    # Simulated delivery, no carrier behind it: log and return a synthetic receipt.
    now = datetime.now(timezone.utc)
    logger.info(f"SMS envoyé à {phone_number}: {message}")
    return {
        "success": True,
        "messageId": f"msg_{int(now.timestamp() * 1000)}",
        "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
