"""
Helpers that keep worker and user identity out of log lines.

Breakdown requests carry free-form worker ids and calendar titles; only
salted hashes and counts are logged.
"""

import hashlib
import re
from typing import Any, Dict, Mapping, Optional, Union

_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_TOKEN_RE = re.compile(r"\b(?:Bearer\s+)?[A-Za-z0-9._-]{16,}\b")

ERR_TAG_MAX = 120


def _digest(value: str, size: int) -> str:
    return hashlib.blake2b(value.encode(), digest_size=size).hexdigest()


def public_worker_id(
    worker_id: Optional[Union[int, str]], salt: str = "shiftpay_worker"
) -> str:
    """
    Salted, non-reversible worker tag (wrk_ + 12 hex chars).

    A missing or blank id gives "wrk_anon".
    """
    if worker_id is None or worker_id == "":
        return "wrk_anon"
    return f"wrk_{_digest(f'{salt}:{worker_id}', 6)}"


def safe_user_hash(user) -> str:
    """Short hash of an authenticated user's primary key, usr_anon otherwise."""
    if not user or not getattr(user, "is_authenticated", False):
        return "usr_anon"

    uid = getattr(user, "id", None) or getattr(user, "pk", None)
    if uid is None:
        return "usr_anon"
    return f"usr_{hashlib.sha256(str(uid).encode()).hexdigest()[:8]}"


def err_tag(exc: BaseException) -> str:
    """
    Loggable summary of an exception.

    An explicit safe_message/public_message attribute wins. Otherwise the
    message is used with emails and token-like strings masked, truncated to
    ERR_TAG_MAX; an empty message falls back to the class name.
    """
    for attr in ("safe_message", "public_message"):
        msg = getattr(exc, attr, None)
        if msg:
            return str(msg)[:ERR_TAG_MAX]

    text = _TOKEN_RE.sub("****", _EMAIL_RE.sub("***@***", str(exc)))
    return text[:ERR_TAG_MAX] if text.strip() else exc.__class__.__name__


def breakdown_request_shape(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Counts describing a validated breakdown request, safe to log.

    Titles, timestamps and worker ids are never included.
    """
    days = data.get("days") or []
    return {
        "year": data.get("year"),
        "month": data.get("month"),
        "days": len(days),
        "shifts": sum(len(day.get("shifts") or []) for day in days),
        "absences": sum(1 for day in days if day.get("status", "normal") != "normal"),
        "event_days": len(data.get("events") or {}),
        "priced": data.get("base_rate") is not None,
    }
