# inventory/auth/gate.py
"""
Low-security admin gate for the mobile admin dashboard, plus user credential
checks. Passwords are only ever held as bcrypt hashes.
"""
import logging

from config import settings
from core.exceptions import AuthenticationError
from core.security import get_password_hash, verify_password
from inventory.store.db_manager import EntityStore

logger = logging.getLogger(__name__)


class AdminGate:
    def __init__(self, password: str | None = None, *, min_length: int | None = None):
        self._hashed_password = get_password_hash(password or settings.ADMIN_PASSWORD)
        self._min_length = settings.MIN_PASSWORD_LENGTH if min_length is None else min_length
        self._logged_in = False

    @property
    def is_logged_in(self) -> bool:
        return self._logged_in

    def login(self, password: str) -> None:
        """Raises AuthenticationError on a wrong password."""
        if not password or not verify_password(password, self._hashed_password):
            logger.warning("Admin gate login rejected")
            raise AuthenticationError("Incorrect admin password")
        self._logged_in = True

    def logout(self) -> None:
        self._logged_in = False

    def change_password(self, new_password: str) -> None:
        """Only while logged in; new password must meet the minimum length."""
        if not self._logged_in:
            raise AuthenticationError("Admin login required")
        if len(new_password or "") < self._min_length:
            raise ValueError(f"Password must be at least {self._min_length} characters")
        self._hashed_password = get_password_hash(new_password)
        logger.info("Admin gate password changed")


def authenticate_user(store: EntityStore, user_id: str, password: str) -> bool:
    """True when `password` matches the stored credential of `user_id`."""
    hashed = store.get_password_hash(user_id)
    if not hashed or not password:
        return False
    return verify_password(password, hashed)
