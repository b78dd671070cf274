# marketplace/services/auth_service.py
import logging
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import bcrypt

from marketplace.config.settings import SESSION_TTL_SECONDS
from marketplace.models.user_model import Customer, Dealer, Provider
from marketplace.services.policy import Actor, CUSTOMER, DEALER, PROVIDER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountConfig:
    model: type
    defaults: Dict[str, object] = field(default_factory=dict)


ACCOUNT_TYPES: Dict[str, AccountConfig] = {
    CUSTOMER: AccountConfig(Customer, {"status": "active"}),
    DEALER: AccountConfig(Dealer, {"status": "active", "rating": 0}),
    PROVIDER: AccountConfig(Provider, {"status": "active"}),
}


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


class SessionStore:
    """In-process map of session token -> actor, with expiry."""

    def __init__(self, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._sessions: Dict[str, Tuple[Actor, float]] = {}
        self._lock = threading.Lock()

    def create(self, actor: Actor) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._purge_expired(time.monotonic())
            self._sessions[token] = (actor, time.monotonic() + self.ttl_seconds)
        logger.info(f"Session opened for {actor.type} {actor.id}")
        return token

    def _purge_expired(self, now: float) -> None:
        # caller holds the lock
        stale = [t for t, (_, expires_at) in self._sessions.items() if expires_at < now]
        for t in stale:
            del self._sessions[t]

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, token: Optional[str]) -> Optional[Actor]:
        if not token:
            return None
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            actor, expires_at = entry
            if expires_at < time.monotonic():
                del self._sessions[token]
                return None
            return actor

    def delete(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            entry = self._sessions.pop(token, None)
        if entry:
            logger.info(f"Session closed for {entry[0].type} {entry[0].id}")

    def drop_actor(self, actor_type: str, actor_id: int) -> None:
        """Forget every session of an account (used when the account is deleted)."""
        with self._lock:
            stale = [t for t, (a, _) in self._sessions.items() if a.type == actor_type and a.id == actor_id]
            for t in stale:
                del self._sessions[t]

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


session_store = SessionStore()


def apply_account_update(account, changes: Dict[str, object]) -> None:
    """Copy provided profile fields onto ``account``; a new password is stored hashed."""
    for name, value in changes.items():
        if value is None:
            continue
        if name == "password":
            value = hash_password(value)
        setattr(account, name, value)
