import logging
from typing import Optional

from fastapi import Depends, Header, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import InvalidToken, TokenExpired, TokenIssuer
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import CurrentUser

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def _unauthorized(code: str, message: str) -> ClientError:
    return ClientError(Error(code, message), status_code=status.HTTP_401_UNAUTHORIZED)


async def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials],
    uow: UnitOfWork,
    tokens: TokenIssuer,
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("UNAUTHORIZED", "Access token is required")

    try:
        user_id = tokens.verify(credentials.credentials)
    except TokenExpired:
        raise _unauthorized("TOKEN_EXPIRED", "Token has expired")
    except InvalidToken:
        raise _unauthorized("INVALID_TOKEN", "Invalid token")

    async with uow:
        user = await uow.users.get_by_id(user_id)
        if user is None:
            raise _unauthorized("UNAUTHORIZED", "Invalid token - user not found")
        return CurrentUser(id=str(user.id), user_name=user.user_name, email=user.email)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> CurrentUser:
    """
    Dependency to authenticate the bearer token from the Authorization header.

    Returns:
        CurrentUser snapshot, also stored on request.state.user

    Raises:
        ClientError: 401 if the header is missing, the token is invalid or
        expired, or the user no longer exists
    """
    current_user = await _resolve_user(credentials, uow, tokens)
    request.state.user = current_user
    return current_user


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> Optional[CurrentUser]:
    """Same resolution as get_current_user, but absence or invalidity yields None"""
    try:
        current_user = await _resolve_user(credentials, uow, tokens)
    except ClientError:
        return None
    request.state.user = current_user
    return current_user


async def track_session_activity(
    request: Request,
    x_session_id: Optional[str] = Header(None),
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> None:
    """
    Best-effort last_activity update for the session named in X-Session-ID.

    Failures are logged and never fail the request.
    """
    if not x_session_id:
        return

    try:
        async with uow:
            touched = await uow.sessions.touch(x_session_id)
            await uow.commit()
        if touched:
            logger.debug(
                "Session activity tracked session_id=%s user_id=%s path=%s method=%s",
                x_session_id,
                current_user.id,
                request.url.path,
                request.method,
            )
    except Exception:
        logger.exception("Error tracking session activity session_id=%s", x_session_id)
