# marketplace/routers/deps.py
from typing import Optional

from fastapi import Cookie, Depends, HTTPException

from marketplace.config.settings import SESSION_COOKIE_NAME
from marketplace.services.auth_service import session_store
from marketplace.services.policy import Actor, check_role


def session_token(session_id: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE_NAME)) -> Optional[str]:
    return session_id


def current_actor(token: Optional[str] = Depends(session_token)) -> Actor:
    if not token:
        raise HTTPException(status_code=401, detail="No session token provided")
    actor = session_store.get(token)
    if actor is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return actor


def allowed(entity: str, operation: str):
    """Dependency: the logged-in actor after the role half of the policy rule has passed."""

    def _dep(actor: Actor = Depends(current_actor)) -> Actor:
        check_role(actor, entity, operation)
        return actor

    return _dep
