from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import ExpiredSignatureError, JWTError, jwt

ACCESS = "access"
REFRESH = "refresh"


class InvalidToken(Exception):
    """Signature mismatch, malformed token, or wrong token type"""


class TokenExpired(InvalidToken):
    """Token was valid but its exp claim has passed"""


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenIssuer:
    """
    Issues and verifies signed access/refresh token pairs.

    Tokens are stateless: validity depends only on signature and expiry.
    Each token carries the user id, its type and a random jti.
    """

    def __init__(
        self,
        secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
    ):
        self.secret = secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config) -> "TokenIssuer":
        return cls(
            secret=config.JWT_SECRET,
            access_ttl=timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=config.JWT_ALGORITHM,
        )

    def _encode(self, user_id: UUID, token_type: str, expires_delta: timedelta) -> str:
        now = datetime.now(UTC)
        payload = {
            "user_id": str(user_id),
            "type": token_type,
            "exp": now + expires_delta,
            "iat": now,
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue(self, user_id: UUID) -> TokenPair:
        """
        Create an access/refresh token pair for a user

        Args:
            user_id: User UUID

        Returns:
            TokenPair with independently expiring tokens
        """
        return TokenPair(
            access_token=self._encode(user_id, ACCESS, self.access_ttl),
            refresh_token=self._encode(user_id, REFRESH, self.refresh_ttl),
        )

    def verify(self, token: str, token_type: str = ACCESS) -> UUID:
        """
        Verify a token and return the user id it was issued for

        Args:
            token: JWT string
            token_type: expected "type" claim

        Raises:
            TokenExpired: exp has passed
            InvalidToken: anything else wrong with the token
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpired("Token has expired") from exc
        except JWTError as exc:
            raise InvalidToken("Invalid token") from exc

        if payload.get("type") != token_type:
            raise InvalidToken("Invalid token type")

        try:
            return UUID(str(payload["user_id"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken("Invalid token payload") from exc
