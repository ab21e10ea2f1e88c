import logging

from src.libs.result import Error, Result, Return
from src.api.utils.jwt import TokenIssuer
from src.app.repositories.user_repository import UserAlreadyExists
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from .dtos import UserProfile
from .register_dto import RegisterCommand, RegisterResponse

logger = logging.getLogger(__name__)

USER_ALREADY_EXISTS = Error(
    "USER_ALREADY_EXISTS", "User with this email or username already exists"
)


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Reject if email or user name is already taken
    2. Hash password with bcrypt (thread pool)
    3. Create User with lower-cased email
    4. Commit and issue a token pair for the new user id
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, tokens: TokenIssuer):
        self.uow = uow
        self.hasher = hasher
        self.tokens = tokens

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with validated profile and password

        Returns:
            Result[RegisterResponse] with profile and tokens
            or Error(USER_ALREADY_EXISTS)
        """
        async with self.uow:
            if await self.uow.users.exists(command.email, command.user_name):
                return Return.err(USER_ALREADY_EXISTS)

            password_hash = await self.hasher.hash(command.password)

            user = User(
                first_name=command.first_name,
                last_name=command.last_name,
                user_name=command.user_name,
                email=command.email.lower(),
                password_hash=password_hash,
                gender=command.gender,
                dob=command.dob,
            )
            try:
                user = await self.uow.users.create(user)
            except UserAlreadyExists:
                # Lost the race against a concurrent registration
                logger.warning(
                    "Registration conflict user_name=%s", command.user_name
                )
                return Return.err(USER_ALREADY_EXISTS)

            await self.uow.commit()

            tokens = self.tokens.issue(user.id)

            logger.info(
                "User registered user_id=%s user_name=%s", user.id, user.user_name
            )

            return Return.ok(
                RegisterResponse(
                    user=UserProfile.from_entity(user),
                    access_token=tokens.access_token,
                    refresh_token=tokens.refresh_token,
                )
            )
