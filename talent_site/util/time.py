from __future__ import annotations

from datetime import datetime, timezone


def utcnow_iso() -> str:
    """Current UTC time as ISO-8601 string with Z."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def to_utc_iso(dt: datetime) -> str:
    """UTC ISO-8601 with Z, keeping sub-second precision when present."""
    # Naive datetimes are taken to be UTC already.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: str | None) -> str | None:
    """Coerce a client-supplied timestamp string into stored ISO-8601 UTC form.

    Returns None for a missing/blank value. Raises ValueError if the string is not
    an ISO-8601 date or datetime (a trailing 'Z' is accepted), or if converting it
    to UTC leaves the representable datetime range.
    """
    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return to_utc_iso(datetime.fromisoformat(s))
    except OverflowError as e:
        raise ValueError("timestamp_out_of_range") from e
