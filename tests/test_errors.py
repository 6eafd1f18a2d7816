"""Tests for the ordered error classifier."""

from __future__ import annotations

from dbdialects.errors import (
    CONNECTION_ERROR_MESSAGES,
    ClassifiedError,
    ErrorCategory,
    ErrorPattern,
    classify_message,
)

_PATTERNS = (
    ErrorPattern.of(r"^timeout while resolving .*$", ErrorCategory.INVALID_HOSTNAME),
    ErrorPattern.of(r".*timeout.*", ErrorCategory.CANNOT_CONNECT_CHECK_HOST_AND_PORT),
)


def test_first_match_wins():
    classified = classify_message("timeout while resolving db.local", _PATTERNS)
    assert classified.category is ErrorCategory.INVALID_HOSTNAME


def test_later_pattern_used_when_earlier_misses():
    classified = classify_message("read timeout after 10s", _PATTERNS)
    assert classified.category is ErrorCategory.CANNOT_CONNECT_CHECK_HOST_AND_PORT


def test_patterns_match_whole_message():
    pattern = ErrorPattern.of(r"Access denied", ErrorCategory.USERNAME_OR_PASSWORD_INCORRECT)
    assert pattern.matches("Access denied")
    assert not pattern.matches("Access denied for user 'x'")


def test_dot_matches_newlines():
    pattern = ErrorPattern.of(r"^Unknown database .*$", ErrorCategory.DATABASE_NAME_INCORRECT)
    assert pattern.matches("Unknown database foo\nat line 1")


def test_no_patterns_is_unclassified():
    classified = classify_message("anything", ())
    assert classified == ClassifiedError(ErrorCategory.UNCLASSIFIED, "anything")
    assert classified.humanize() == "anything"


def test_humanize_with_custom_messages():
    classified = ClassifiedError(ErrorCategory.INVALID_HOSTNAME, "raw")
    assert classified.humanize() == CONNECTION_ERROR_MESSAGES[ErrorCategory.INVALID_HOSTNAME]
    assert classified.humanize({ErrorCategory.INVALID_HOSTNAME: "Bad host"}) == "Bad host"
    assert classified.humanize({}) == "raw"


def test_every_category_except_unclassified_has_a_message():
    for category in ErrorCategory:
        if category is ErrorCategory.UNCLASSIFIED:
            assert category not in CONNECTION_ERROR_MESSAGES
        else:
            assert CONNECTION_ERROR_MESSAGES[category]
