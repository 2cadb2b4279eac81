"""
In-memory email verification codes
One live code per email, valid for a short TTL and usable exactly once
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable, Optional

from .config import VERIFICATION_CODE_TTL_SECONDS, VERIFICATION_SWEEP_INTERVAL_SECONDS
from .exceptions import CodeExpiredError, CodeMismatchError, CodeNotFoundError

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_verification_code() -> str:
    """Uniformly random 6-digit code in 100000-999999"""
    return str(100000 + secrets.randbelow(900000))


@dataclass(frozen=True)
class VerificationEntry:
    code: str
    expires_at: datetime


class VerificationStore:
    """Thread-safe map of email -> pending verification code"""

    def __init__(
        self,
        ttl_seconds: int = VERIFICATION_CODE_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entries: dict[str, VerificationEntry] = {}
        self._lock = Lock()

    def issue(self, email: str) -> str:
        """Create a new code for email, replacing any previous one"""
        code = generate_verification_code()
        entry = VerificationEntry(code=code, expires_at=self._clock() + self.ttl)
        with self._lock:
            self._entries[email] = entry
        logger.info(f"🔢 Verification code issued for {email} (expires {entry.expires_at.isoformat()})")
        return code

    def verify(self, email: str, code: str) -> None:
        """
        Consume the code for email.

        Raises CodeNotFoundError, CodeExpiredError (entry is dropped) or
        CodeMismatchError (entry is kept).
        """
        with self._lock:
            entry = self._entries.get(email)
            if entry is None:
                logger.warning(f"⚠️ No verification code found for {email}")
                raise CodeNotFoundError()

            if self._clock() > entry.expires_at:
                del self._entries[email]
                logger.warning(f"⏰ Verification code expired for {email}")
                raise CodeExpiredError()

            if not secrets.compare_digest(entry.code.encode(), code.strip().encode()):
                logger.warning(f"❌ Invalid verification code for {email}")
                raise CodeMismatchError()

            del self._entries[email]
        logger.info(f"🎉 Email verified: {email}")

    def discard(self, email: str) -> bool:
        """Drop any pending code for email"""
        with self._lock:
            return self._entries.pop(email, None) is not None

    def has_pending(self, email: str) -> bool:
        with self._lock:
            entry = self._entries.get(email)
            return entry is not None and entry.expires_at >= self._clock()

    def sweep(self) -> int:
        """Remove every expired entry, returning how many were removed"""
        now = self._clock()
        with self._lock:
            expired = [email for email, entry in self._entries.items() if entry.expires_at < now]
            for email in expired:
                del self._entries[email]

        for email in expired:
            logger.debug(f"🧹 Deleted expired verification code for {email}")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


async def run_periodic_sweep(store: VerificationStore, interval_seconds: float) -> None:
    """Sweep expired codes forever; cancel the task to stop"""
    logger.info(f"🚀 Starting verification code cleanup (every {interval_seconds}s)")

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = store.sweep()
            if removed:
                logger.info(f"🧹 Removed {removed} expired verification code(s)")
        except Exception as e:
            logger.error(f"❌ Error in verification cleanup loop: {e}")


verification_store = VerificationStore()


def get_verification_store() -> VerificationStore:
    """Dependency returning the process-wide store"""
    return verification_store


def start_sweeper(
    store: Optional[VerificationStore] = None, interval_seconds: Optional[float] = None
) -> asyncio.Task:
    if store is None:
        store = verification_store
    return asyncio.create_task(
        run_periodic_sweep(store, interval_seconds or VERIFICATION_SWEEP_INTERVAL_SECONDS)
    )
