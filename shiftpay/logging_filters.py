# shiftpay/logging_filters.py
import logging
import re
from typing import Any, Mapping

REDACTION = "****"
SENSITIVE_KEYS = {
    "password", "pass", "pwd",
    "token", "authorization", "cookie",
    "email", "phone", "worker_name", "id_number",
}

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_email_re = re.compile(r"([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")
_token_like_re = re.compile(r"(?:Bearer\s+)?[A-Za-z0-9\-_]{32,}")


def _redact_scalar(value: Any) -> Any:
    if value is None or isinstance(value, (int, float, bool)):
        return value
    s = str(value)
    s = _email_re.sub(r"***@\2", s)
    s = _token_like_re.sub(REDACTION, s)
    return s


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: (REDACTION if isinstance(k, str) and k.lower() in SENSITIVE_KEYS else _redact(v))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple, set)):
        return type(value)(_redact(v) for v in value)
    return _redact_scalar(value)


class PIIRedactorFilter(logging.Filter):
    """Redact common PII in log records (msg, args and extra fields)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _redact_scalar(record.msg)

        args = getattr(record, "args", None)
        if args:
            if isinstance(args, Mapping):
                record.args = _redact(args)
            elif isinstance(args, (tuple, list)):
                record.args = tuple(_redact(a) for a in args)

        for key in list(vars(record)):
            if key in _RECORD_ATTRS:
                continue
            if key.lower() in SENSITIVE_KEYS:
                setattr(record, key, REDACTION)
            elif isinstance(getattr(record, key), str):
                setattr(record, key, _redact_scalar(getattr(record, key)))
        return True
