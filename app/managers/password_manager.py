"""
Password hashing module using Argon2 with passlib's CryptContext.

Hashing and verification are CPU bound, so the module-level coroutines run
them in a small thread pool and never block the event loop.
"""

from asyncio import get_event_loop
from concurrent.futures import ThreadPoolExecutor

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from app.configs import CONFIG_MAP, settings
from app.decorators.with_retry import with_retry
from app.errors.password_hasher import PasswordHashingError
from app.monitoring import get_logger

executor = ThreadPoolExecutor(max_workers=4)
logger = get_logger(__name__)


class PasswordHasher:
    """
    A secure password hashing and verification manager using Argon2id algorithm.

    This class wraps passlib's CryptContext to provide:
    - Secure password hashing with Argon2id
    - Password verification that never raises on mismatch
    """

    def __init__(self, level: str | None = None) -> None:
        """
        Initialize the PasswordHasher with Argon2id as the primary scheme.

        Configuration:
        - schemes: argon2 as primary, pbkdf2_sha256 accepted for old hashes
        - deprecated: pbkdf2_sha256, only kept to verify old hashes
        - argon2 cost parameters come from ``CONFIG_MAP[level]``
        """
        self.level = level or settings.PASSWORD_SECURITY_LEVEL
        self.pwd_context = CryptContext(
            schemes=["argon2", "pbkdf2_sha256"],
            deprecated="pbkdf2_sha256",
            argon2__memory_cost=CONFIG_MAP[self.level].memory_cost,
            argon2__time_cost=CONFIG_MAP[self.level].time_cost,
            argon2__parallelism=CONFIG_MAP[self.level].parallelism,
        )
        logger.info(f"PasswordHasher initialized with Argon2id on level {self.level}")

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password using Argon2id.

        Args:
            password: The plaintext password to hash

        Returns:
            str: The hashed password in Argon2id format

        Raises:
            ValueError: If password is empty
            PasswordHashingError: If hashing fails

        Example:
            >>> hasher = PasswordHasher()
            >>> hasher.hash("my_secure_password")  # $argon2id$v=19$m=65536,t=3,p=4$...
        """
        if not password:
            msg = "Password cannot be empty"
            raise ValueError(msg)

        try:
            hashed_password = self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Invalid password format")
            mssg = "Failed to hash password"
            raise PasswordHashingError(mssg) from e
        logger.debug(f"Password hashed successfully on level {self.level}")
        return hashed_password

    def verify(self, password: str, hashed_password: str | None) -> bool:
        """
        Verify a plaintext password against a hashed password.

        A missing hash still costs one dummy verification so that unknown
        accounts take as long to reject as wrong passwords.

        Example:
            >>> hasher = PasswordHasher()
            >>> hashed = hasher.hash("my_password")
            >>> hasher.verify("my_password", hashed)
            True
            >>> hasher.verify("wrong_password", hashed)
            False
        """
        if not isinstance(hashed_password, str) or not hashed_password.strip():
            self.pwd_context.dummy_verify()
            return False

        try:
            return self.pwd_context.verify(password, hashed_password)
        except (ValueError, TypeError):
            logger.exception("Stored hash is corrupted or invalid format")
            return False


_default_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """
    Get or create the default password hasher instance.

    Returns:
        PasswordHasher: The singleton password hasher instance
    """
    global _default_hasher  # noqa: PLW0603
    if _default_hasher is None:
        _default_hasher = PasswordHasher()
    return _default_hasher


@with_retry(base_delay=1, max_delay=10, exec_retry=PasswordHashingError)
async def hash_password(password: str) -> str:
    """
    Hash a password with the default hasher off the event loop.

    Example:
        >>> hashed = await hash_password("my_password")
    """
    return await get_event_loop().run_in_executor(
        executor,
        get_password_hasher().hash,
        password,
    )


async def verify_password(password: str, hashed_password: str | None) -> bool:
    """
    Verify a password with the default hasher off the event loop.

    Example:
        >>> is_valid = await verify_password("my_password", hashed_password)
    """
    return await get_event_loop().run_in_executor(
        executor,
        get_password_hasher().verify,
        password,
        hashed_password,
    )

