# curations/routers/_guards.py
import hmac
from typing import Optional

from ..errors import Unauthorized
from ..logger import get_logger

logger = get_logger(__name__)


class AdminGuard:
    """Decides whether a caller may use the admin endpoints."""

    def check(self, token: Optional[str]) -> None:
        raise NotImplementedError


class TokenGuard(AdminGuard):
    """
    Single shared secret.
    The caller's token has to match exactly, otherwise 401.
    """

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("TokenGuard needs a non-empty secret")
        self._secret = secret.encode("utf-8")

    def check(self, token: Optional[str]) -> None:
        if not token or not hmac.compare_digest(token.encode("utf-8"), self._secret):
            raise Unauthorized()


class OpenGuard(AdminGuard):
    """No ADMIN_TOKEN configured: everyone is admin. Demo mode only."""

    def check(self, token: Optional[str]) -> None:
        return None


def build_guard(secret: str) -> AdminGuard:
    if secret:
        return TokenGuard(secret)
    logger.warning("ADMIN_TOKEN is not set: admin endpoints are open to everyone")
    return OpenGuard()
