"""
Short-lived one-time passwords for email verification.

Codes live in process memory, keyed by email, and are single use. Delivery
is not handled here: the issued code is written to the debug log.
"""
import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Tuple

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class _PendingOTP:
    code: str
    expires_at: datetime


class OTPService:
    def __init__(self, expire_minutes: int = settings.OTP_EXPIRE_MINUTES, length: int = settings.OTP_LENGTH):
        self.expire_minutes = expire_minutes
        self.length = length
        self._pending: Dict[str, _PendingOTP] = {}

    @property
    def expires_in(self) -> int:
        """Lifetime of a code in seconds"""
        return self.expire_minutes * 60

    def _purge_expired(self) -> None:
        now = datetime.utcnow()
        for email in [e for e, p in self._pending.items() if now > p.expires_at]:
            del self._pending[email]

    def issue(self, email: str) -> str:
        """Create a fresh code for email, replacing any pending one"""
        self._purge_expired()
        code = "".join(secrets.choice(string.digits) for _ in range(self.length))
        self._pending[email] = _PendingOTP(
            code=code, expires_at=datetime.utcnow() + timedelta(minutes=self.expire_minutes)
        )
        logger.info(f"OTP issued for {email}, valid for {self.expire_minutes} minutes")
        logger.debug(f"OTP for {email}: {code}")
        return code

    def verify(self, email: str, code: str) -> Tuple[bool, str]:
        pending = self._pending.get(email)
        if pending is None:
            return False, "OTP not found or already used"
        if datetime.utcnow() > pending.expires_at:
            self._pending.pop(email, None)
            return False, "OTP has expired"
        if not secrets.compare_digest(pending.code, str(code).strip()):
            return False, "Invalid OTP"
        self._pending.pop(email, None)
        return True, "OTP verified"


# Singleton shared by the auth endpoints
_otp_service_instance = None

def get_otp_service() -> OTPService:
    global _otp_service_instance
    if _otp_service_instance is None:
        _otp_service_instance = OTPService()
    return _otp_service_instance
