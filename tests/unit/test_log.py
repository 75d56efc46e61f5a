import logging

from opencode_sync.log import SecretRedactingFilter


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("opencode_sync", logging.INFO, __file__, 1, msg, args, None)


def test_bearer_tokens_are_redacted() -> None:
    record = _record("sending %s", "Authorization: Bearer abc.def")

    SecretRedactingFilter().filter(record)

    assert "abc.def" not in record.getMessage()
    assert "[REDACTED]" in record.getMessage()


def test_sk_keys_are_redacted() -> None:
    record = _record("key sk-1234567890abcdef in use")

    SecretRedactingFilter().filter(record)

    assert record.getMessage() == "key [REDACTED_API_KEY] in use"
