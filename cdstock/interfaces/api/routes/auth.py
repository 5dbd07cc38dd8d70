"""Endpoints for sign-up, sign-in and sign-out."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from cdstock.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    record_login,
    register_user,
)
from cdstock.domain.entities import User
from cdstock.domain.errors import CDStockError
from cdstock.infrastructure.database import get_db
from cdstock.infrastructure.security import create_access_token, password_signature
from cdstock.interfaces.api.dependencies import get_current_user
from cdstock.interfaces.api.routes_helpers import to_http_exception
from cdstock.interfaces.api.schemas import SignUpRequest, Token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _issue_token(user: User) -> dict[str, str]:
    access_token = create_access_token(
        data={
            "sub": user.id,
            "role": user.role.value,
            "pwd_sig": password_signature(user.password, user.is_blocked),
        }
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user_id": user.id,
        "role": user.role.value,
    }


@router.post("/sign-up", response_model=Token, status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest, db: Session = Depends(get_db)):
    """Register a ``normal`` user and sign them in."""

    try:
        user = register_user(
            db,
            email=payload.email,
            password=payload.password,
            name=payload.name,
            phone=payload.phone,
        )
    except CDStockError as exc:
        raise to_http_exception(exc) from exc

    logger.info("Registered user %s", user.id)
    return _issue_token(user)


# Keeps the field names expected by OAuth2PasswordRequestForm: username holds the email.
@router.post("/token", response_model=Token)
def sign_in(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Authenticate by email and password and return a JWT."""

    user, auth_status = authenticate_user(db, form_data.username, form_data.password)

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if auth_status is AuthenticationStatus.BLOCKED:
        logger.info("Blocked user %s attempted to sign in", user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is blocked",
            headers={"WWW-Authenticate": "Bearer"},
        )

    record_login(db, user.id)
    return _issue_token(user)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(current_user: User = Depends(get_current_user)) -> Response:
    """Tokens are stateless; the client discards its copy."""

    logger.debug("User %s signed out", current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
