import bcrypt
from starlette.concurrency import run_in_threadpool

# bcrypt only consumes the first 72 bytes; newer releases reject longer input.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


class PasswordHasher:
    """
    Bcrypt hashing executed in the thread pool.

    bcrypt is deliberately slow; running it on the event loop would stall
    every other request for the duration of the hash.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    async def hash(self, password: str) -> str:
        hashed = await run_in_threadpool(
            bcrypt.hashpw, _encode(password), bcrypt.gensalt(self.rounds)
        )
        return hashed.decode("utf-8")

    async def verify(self, password: str, password_hash: str) -> bool:
        try:
            return await run_in_threadpool(
                bcrypt.checkpw, _encode(password), password_hash.encode("utf-8")
            )
        except ValueError:
            # Malformed stored hash
            return False

    async def verify_dummy(self, password: str) -> bool:
        """Burn the same time as a real check when the user does not exist"""
        await run_in_threadpool(bcrypt.checkpw, _encode(password), self._dummy_hash)
        return False
