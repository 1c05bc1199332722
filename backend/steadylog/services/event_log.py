# event log helpers shared by the insight and trend services
# entries arrive either as raw store documents or as EventEntry models,
# so every read goes through entry_field and tolerates missing/bad values

import logging
from collections import Counter
from collections.abc import Mapping
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def entry_field(entry: Any, name: str, default: Any = None) -> Any:
    """read a field from a store document or a model"""
    if isinstance(entry, Mapping):
        return entry.get(name, default)
    return getattr(entry, name, default)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """map an iana zone name to a tzinfo, falling back to utc"""
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, using UTC")
        return timezone.utc


def parse_timestamp(value: Any, tz: tzinfo = timezone.utc) -> Optional[datetime]:
    """parse an event timestamp into an aware datetime in tz.
    accepts datetimes and iso-8601 strings. naive values are treated as utc,
    which is how the store writes them. returns None for anything unparseable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(tz)
    except (OverflowError, ValueError):
        return None


def valid_intensity(value: Any) -> Optional[int]:
    """intensity as an int in 1..10, or None"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    value = int(value)
    if 1 <= value <= 10:
        return value
    return None


def count_triggers(entries: Iterable[Any]) -> Counter:
    """count every trigger occurrence. the counter keeps first-seen order,
    which callers rely on to break ties. set-valued fields are read in
    sorted order so the result does not depend on hash seeds"""
    counts: Counter = Counter()
    for entry in entries:
        triggers = entry_field(entry, "triggers")
        if isinstance(triggers, (set, frozenset)):
            triggers = sorted(t for t in triggers if isinstance(t, str))
        elif not isinstance(triggers, (list, tuple)):
            continue
        for trigger in triggers:
            if isinstance(trigger, str) and trigger:
                counts[trigger] += 1
    return counts
