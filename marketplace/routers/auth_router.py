# marketplace/routers/auth_router.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from marketplace.config.settings import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_TTL_SECONDS
from marketplace.database.session import get_db
from marketplace.routers.deps import current_actor, session_token
from marketplace.schemas.users import (
    CustomerRegister, DealerRegister, ProviderRegister, LoginPayload, LoginResponse,
    CustomerOut, DealerOut, ProviderOut,
)
from marketplace.services.auth_service import ACCOUNT_TYPES, hash_password, verify_password, session_store
from marketplace.services.policy import Actor, CUSTOMER, DEALER, PROVIDER
from marketplace.services.retry import create_with_retry, insert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

OUT_SCHEMAS = {CUSTOMER: CustomerOut, DEALER: DealerOut, PROVIDER: ProviderOut}


def account_out(user_type: str, account):
    return OUT_SCHEMAS[user_type].model_validate(account)


def _register(db: Session, user_type: str, fields: dict) -> dict:
    config = ACCOUNT_TYPES[user_type]
    values = {**config.defaults, **fields, "password": hash_password(fields["password"])}
    try:
        account = create_with_retry(db, config.model, lambda: insert(db, config.model(**values)), entity=user_type)
        db.commit()
        db.refresh(account)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error registering {user_type}: {e}")

    logger.info(f"Registered {user_type} {account.id} ({account.username})")
    return {
        "message": f"{user_type.capitalize()} registered successfully",
        user_type: account_out(user_type, account),
    }


@router.post("/register/customer", status_code=201)
def register_customer(body: CustomerRegister, db: Session = Depends(get_db)):
    return _register(db, CUSTOMER, body.model_dump())


@router.post("/register/dealer", status_code=201)
def register_dealer(body: DealerRegister, db: Session = Depends(get_db)):
    return _register(db, DEALER, body.model_dump())


@router.post("/register/provider", status_code=201)
def register_provider(body: ProviderRegister, db: Session = Depends(get_db)):
    return _register(db, PROVIDER, body.model_dump())


@router.post("/login", response_model=LoginResponse)
def login(body: LoginPayload, response: Response, db: Session = Depends(get_db)):
    config = ACCOUNT_TYPES.get(body.userType)
    if config is None:
        raise HTTPException(status_code=400, detail="Invalid user type")

    account = db.query(config.model).filter(config.model.username == body.username).first()
    if not account:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if account.status != "active":
        raise HTTPException(status_code=403, detail="Account is not active")
    if not verify_password(body.password, account.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = session_store.create(Actor(id=account.id, type=body.userType, username=account.username))
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    logger.info(f"Login: {body.userType} {account.id}")
    return LoginResponse(userType=body.userType, userId=account.id, username=account.username, email=account.email)


@router.post("/logout")
def logout(response: Response, token: Optional[str] = Depends(session_token)):
    session_store.delete(token)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/", httponly=True, secure=SESSION_COOKIE_SECURE, samesite="lax")
    return {"message": "Logout successful"}


@router.get("/profile")
def profile(actor: Actor = Depends(current_actor), db: Session = Depends(get_db)):
    account = db.get(ACCOUNT_TYPES[actor.type].model, actor.id)
    if not account:
        raise HTTPException(status_code=404, detail="User not found")
    return {"userType": actor.type, "user": account_out(actor.type, account)}
