from datetime import date

import bcrypt
import pytest

from src.app.repositories.user_repository import UserAlreadyExists
from src.app.use_cases.auth.register_dto import RegisterCommand
from src.app.use_cases.auth.register_use_case import RegisterUseCase
from src.domain.entities import Gender


@pytest.fixture
def command():
    return RegisterCommand(
        first_name="Jane",
        last_name="Doe",
        user_name="jane",
        email="Jane@Example.com",
        password="SecurePass123!",
        gender=Gender.female,
        dob=date(1990, 5, 17),
    )


@pytest.mark.asyncio
async def test_successful_register(mock_uow, hasher, token_issuer, command):
    """New user is stored with a bcrypt hash and receives tokens"""
    # Arrange
    mock_uow.users.create.side_effect = lambda user: user

    use_case = RegisterUseCase(mock_uow, hasher, token_issuer)

    # Act
    result = await use_case.execute(command)

    # Assert
    assert result.is_ok()
    data = result.value
    assert data.success is True
    assert data.message == "User registered successfully"
    assert data.user.email == "jane@example.com"
    assert token_issuer.verify(data.access_token) == mock_uow.users.create.call_args.args[0].id

    created = mock_uow.users.create.call_args.args[0]
    assert created.password_hash != "SecurePass123!"
    assert bcrypt.checkpw(b"SecurePass123!", created.password_hash.encode())

    mock_uow.users.exists.assert_called_once_with("Jane@Example.com", "jane")
    mock_uow.commit.assert_called_once()
    mock_uow.sessions.open.assert_not_called()


@pytest.mark.asyncio
async def test_register_duplicate_user(mock_uow, hasher, token_issuer, command):
    mock_uow.users.exists.return_value = True

    result = await RegisterUseCase(mock_uow, hasher, token_issuer).execute(command)

    assert result.is_err()
    assert result.error.code == "USER_ALREADY_EXISTS"
    assert result.error.message == "User with this email or username already exists"
    mock_uow.users.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_register_loses_race_to_concurrent_insert(
    mock_uow, hasher, token_issuer, command
):
    """Pre-check passes but the insert hits the unique constraint"""
    mock_uow.users.create.side_effect = UserAlreadyExists("jane@example.com")

    result = await RegisterUseCase(mock_uow, hasher, token_issuer).execute(command)

    assert result.is_err()
    assert result.error.code == "USER_ALREADY_EXISTS"
    assert result.error.message == "User with this email or username already exists"
    mock_uow.commit.assert_not_called()
