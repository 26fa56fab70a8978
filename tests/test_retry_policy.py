"""Transition table of the per-URL retry policy."""

import pytest

import config
from retry_policy import AuditState, next_state

TIMEOUT = config.AUDIT_TIMEOUT_MESSAGE


@pytest.mark.parametrize("attempt", [1, 2, 3])
def test_success_always_ends_in_succeeded(attempt: int) -> None:
    assert next_state(attempt) is AuditState.SUCCEEDED


@pytest.mark.parametrize(
    "attempt, message, expected",
    [
        (1, "net::ERR_NAME_NOT_RESOLVED", AuditState.ATTEMPTING),
        (1, TIMEOUT, AuditState.ATTEMPTING),
        (2, "net::ERR_NAME_NOT_RESOLVED", AuditState.ATTEMPTING),
        (2, TIMEOUT, AuditState.EXHAUSTED),
        (3, "net::ERR_NAME_NOT_RESOLVED", AuditState.EXHAUSTED),
        (3, TIMEOUT, AuditState.EXHAUSTED),
    ],
)
def test_failure_transitions(attempt: int, message: str, expected: AuditState) -> None:
    assert next_state(attempt, message) is expected


def test_only_the_exact_timeout_message_ends_early() -> None:
    assert next_state(2, TIMEOUT + "!") is AuditState.ATTEMPTING
    assert next_state(2, TIMEOUT.lower()) is AuditState.ATTEMPTING
    assert next_state(2, "") is AuditState.ATTEMPTING
