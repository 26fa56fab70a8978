from enum import Enum
import config

class AuditState(Enum):
    """States a single URL goes through while it is being audited."""
    WAITING = "waiting"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"

def next_state(attempt, error_message=None):
    """
    Returns the state that follows attempt number `attempt` (1-based).

    A successful attempt (no error message) always ends in SUCCEEDED. A failed
    attempt ends in EXHAUSTED once the last attempt is used up, or early when the
    second attempt timed out as well. A non-timeout failure on the second attempt
    still gets a third try. Anything else goes back to ATTEMPTING for the next try.
    """
    if error_message is None:
        return AuditState.SUCCEEDED
    if attempt >= config.MAX_RETRIES:
        return AuditState.EXHAUSTED
    if attempt == config.TIMEOUT_RETRY_LIMIT and error_message == config.AUDIT_TIMEOUT_MESSAGE:
        return AuditState.EXHAUSTED
    return AuditState.ATTEMPTING
