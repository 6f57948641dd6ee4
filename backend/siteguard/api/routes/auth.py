import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, HTTPException, status

from siteguard import crud
from siteguard.api.deps import CurrentUser, SessionDep
from siteguard.core import security
from siteguard.core.config import settings
from siteguard.models import (
    AuthSession,
    DataResponse,
    User,
    UserCreate,
    UserLogin,
    UserPublic,
    UserRegister,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _issue_session(user: User) -> AuthSession:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = security.create_access_token(user.id, expires_delta=access_token_expires)
    return AuthSession(token=token, user=UserPublic.model_validate(user))


@router.post("/signup", response_model=DataResponse[AuthSession], status_code=status.HTTP_201_CREATED)
def signup(session: SessionDep, user_in: UserRegister) -> Any:
    """
    Create a new account and return a token for it.
    """
    if crud.get_user_by_email(session=session, email=user_in.email):
        raise HTTPException(
            status_code=400,
            detail="The user with this email already exists in the system",
        )
    user_create = UserCreate.model_validate(user_in)
    user = crud.create_user(session=session, user_create=user_create)
    logger.info("Registered user %s", user.id)
    return DataResponse(data=_issue_session(user))


@router.post("/login", response_model=DataResponse[AuthSession])
def login(session: SessionDep, credentials: UserLogin) -> Any:
    user = crud.authenticate(
        session=session, email=credentials.email, password=credentials.password
    )
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    elif not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return DataResponse(data=_issue_session(user))


@router.get("/me", response_model=DataResponse[UserPublic])
def read_current_user(current_user: CurrentUser) -> Any:
    return DataResponse(data=UserPublic.model_validate(current_user))
