import re
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from src.api.error import ClientError, ServerError
from src.api.utils.device import parse_device_info
from src.api.utils.jwt import TokenIssuer
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    CurrentUser,
    LoginResponse,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    UserProfile,
)
from src.app.use_cases.users import LoadProfileUseCase
from src.depends import (
    get_current_user,
    get_optional_user,
    get_password_hasher,
    get_token_issuer,
    get_unit_of_work,
    track_session_activity,
)
from src.domain.entities import Gender

router = APIRouter(prefix="/auth", tags=["Authentication"])

USER_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]"
)


def _check_password(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase "
            "letter, one number, and one special character"
        )
    return value


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    user_name: str = Field(..., min_length=3, max_length=30)
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, max_length=128)
    gender: Gender
    dob: date = Field(..., description="Date of birth (YYYY-MM-DD)")

    @field_validator("first_name", "last_name", "user_name", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("user_name")
    @classmethod
    def check_user_name(cls, value: str) -> str:
        if not USER_NAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return value

    @field_validator("email")
    @classmethod
    def fold_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)

    @field_validator("dob")
    @classmethod
    def check_age(cls, value: date) -> date:
        age = date.today().year - value.year
        if age < 13 or age > 120:
            raise ValueError("You must be between 13 and 120 years old")
        return value


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Register a new user account.

    Returns the public profile and a token pair. No session is opened.

    Raises:
        - 409 Conflict: Email or user name already taken
        - 422 Unprocessable Entity: Invalid input
    """
    command = RegisterCommand(**request.model_dump())

    use_case = RegisterUseCase(uow, hasher, tokens)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "USER_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    identifier is an email address or a user name.
    """

    identifier: str = Field(..., min_length=1, description="Email or username")
    password: str = Field(..., min_length=1, description="User password")

    @field_validator("identifier", mode="before")
    @classmethod
    def strip_identifier(cls, value):
        return value.strip() if isinstance(value, str) else value


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    User Login

    Verifies credentials, opens a session record and returns tokens.

    Raises:
        - 401 Unauthorized: Invalid credentials (unknown user or wrong password)
    """
    device = parse_device_info(http_request)

    use_case = LoginUseCase(uow, hasher, tokens)
    result = await use_case.execute(request.identifier, request.password, device)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class LogoutRequest(BaseModel):
    """Logout HTTP request payload"""

    session_id: Optional[str] = Field(None, description="Session to close")


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: Optional[LogoutRequest] = None,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    With session_id: close that session.
    Without session_id but authenticated: close every session of the caller.
    Always returns success.
    """
    session_id = request.session_id if request else None
    user_id = UUID(current_user.id) if current_user else None

    use_case = LogoutUseCase(uow)
    result = await use_case.execute(user_id=user_id, session_id=session_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class RefreshRequest(BaseModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field(..., min_length=1, description="Refresh token")
    session_id: Optional[str] = Field(
        None, description="Session to renew alongside the tokens"
    )


@router.post(
    "/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse
)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Refresh Tokens

    Raises:
        - 401 Unauthorized: Invalid or expired refresh token, or user gone
    """
    use_case = RefreshTokenUseCase(uow, tokens)
    result = await use_case.execute(request.refresh_token, request.session_id)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_TOKEN":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=UserProfile,
    dependencies=[Depends(track_session_activity)],
)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current user's profile

    Raises:
        - 401 Unauthorized: Missing, invalid or expired token
        - 404 Not Found: User deleted
    """
    use_case = LoadProfileUseCase(uow)
    result = await use_case.execute(UUID(current_user.id))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
