"""Connection error categories and the ordered regex classifier behind them.

Categories are stable and user-facing; the raw backend text is always kept
so an unclassified failure still carries the full diagnostic.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass


class ErrorCategory(enum.Enum):
    CANNOT_CONNECT_CHECK_HOST_AND_PORT = "cannot_connect_check_host_and_port"
    DATABASE_NAME_INCORRECT = "database_name_incorrect"
    USERNAME_OR_PASSWORD_INCORRECT = "username_or_password_incorrect"
    INVALID_HOSTNAME = "invalid_hostname"
    UNCLASSIFIED = "unclassified"


CONNECTION_ERROR_MESSAGES: Mapping[ErrorCategory, str] = {
    ErrorCategory.CANNOT_CONNECT_CHECK_HOST_AND_PORT: (
        "Couldn't connect to the database. Check that the host and port are correct."
    ),
    ErrorCategory.DATABASE_NAME_INCORRECT: "The database name looks incorrect.",
    ErrorCategory.USERNAME_OR_PASSWORD_INCORRECT: (
        "The username or password looks incorrect."
    ),
    ErrorCategory.INVALID_HOSTNAME: (
        "The host looks invalid. Double-check it and try again."
    ),
}


@dataclass(frozen=True)
class ClassifiedError:
    category: ErrorCategory
    message: str

    @property
    def is_classified(self) -> bool:
        return self.category is not ErrorCategory.UNCLASSIFIED

    def humanize(self, messages: Mapping[ErrorCategory, str] | None = None) -> str:
        """User-facing text: the category template, or the raw message if none applies."""
        table = CONNECTION_ERROR_MESSAGES if messages is None else messages
        return table.get(self.category, self.message)


@dataclass(frozen=True)
class ErrorPattern:
    pattern: re.Pattern[str]
    category: ErrorCategory

    @classmethod
    def of(cls, regex: str, category: ErrorCategory, flags: int = 0) -> ErrorPattern:
        return cls(pattern=re.compile(regex, flags | re.DOTALL), category=category)

    def matches(self, message: str) -> bool:
        return self.pattern.fullmatch(message) is not None


def classify_message(message: str, patterns: Iterable[ErrorPattern]) -> ClassifiedError:
    """Return the category of the first pattern that matches the whole message.

    Order matters: specific patterns must come before broad ones.
    """
    for entry in patterns:
        if entry.matches(message):
            return ClassifiedError(category=entry.category, message=message)
    return ClassifiedError(category=ErrorCategory.UNCLASSIFIED, message=message)
