"""User accounts and the in-memory directory backing login and registration."""

import hmac
import threading
from dataclasses import dataclass, field
from typing import Optional, Protocol


@dataclass(frozen=True)
class User:
    """A registered account."""

    account: str
    password: str = field(repr=False)
    email: str

    def check_password(self, candidate: Optional[str]) -> bool:
        if candidate is None:
            return False
        return hmac.compare_digest(self.password.encode(), candidate.encode())


class UserRepository(Protocol):
    """Directory service consulted by the account handlers."""

    def save(self, user: User) -> None: ...

    def find_by_account(self, account: Optional[str]) -> Optional[User]: ...


class InMemoryUserRepository:
    """Thread-safe, process-local user directory keyed by account name."""

    def __init__(self, users: tuple[User, ...] = ()) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {user.account: user for user in users}

    def save(self, user: User) -> None:
        with self._lock:
            self._users[user.account] = user

    def find_by_account(self, account: Optional[str]) -> Optional[User]:
        if not account:
            return None
        with self._lock:
            return self._users.get(account)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
