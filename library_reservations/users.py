from __future__ import annotations

from .errors import ConflictError, InvalidArgumentError


class UserRegistry:
    def __init__(self) -> None:
        self._emails: list[str] = []
        self._known: set[str] = set()

    def __len__(self) -> int:
        return len(self._emails)

    def register(self, email: str | None) -> None:
        if not email or not email.strip():
            raise InvalidArgumentError("Email cannot be null or empty.")
        if email in self._known:
            raise ConflictError(f"User with email '{email}' is already registered.")
        self._emails.append(email)
        self._known.add(email)

    def is_registered(self, email: str | None) -> bool:
        return email is not None and email in self._known

    def emails(self) -> tuple[str, ...]:
        return tuple(self._emails)
