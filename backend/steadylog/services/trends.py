# heatmap and trend generators for the patient dashboard charts
# every output row is dense (one per calendar day, no gaps) and every
# average over an empty bucket is 0, never nan
#
# rounding is half-up everywhere (2.5 -> 3, 4.25 -> 4.3)

import logging
import math
from collections import Counter
from datetime import date, timedelta, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable

import pandas as pd

from steadylog.models.insights import HeatmapDay, LocationShare, TrendPoint, TriggerShare
from steadylog.models.taxonomy import SEVERE_EVENT_TYPES, color_for, label_for
from steadylog.services.event_log import count_triggers, entry_field, parse_timestamp, valid_intensity

logger = logging.getLogger(__name__)

DEFAULT_HEATMAP_LOOKBACK_DAYS = 60
DEFAULT_HEATMAP_WINDOW_DAYS = 90
DEFAULT_TREND_DAYS = 30


def round_half_up(value: float, digits: int = 0) -> float:
    """round to `digits` decimals with ties away from zero"""
    if value is None or not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _share(count: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(round_half_up(count / total * 100))


def _daily_frame(entries: Iterable[Any], tz: tzinfo) -> pd.DataFrame:
    """one row per usable entry with its local calendar day"""
    rows = []
    for entry in entries:
        moment = parse_timestamp(entry_field(entry, "timestamp"), tz)
        intensity = valid_intensity(entry_field(entry, "intensity"))
        if moment is None or intensity is None:
            continue
        event_type = entry_field(entry, "type")
        rows.append({
            "day": moment.date().isoformat(),
            "type": event_type if isinstance(event_type, str) else None,
            "intensity": intensity,
        })
    return pd.DataFrame(rows, columns=["day", "type", "intensity"])


def _daily_totals(frame: pd.DataFrame) -> dict[str, tuple[int, int]]:
    """map iso day -> (event count, intensity sum)"""
    if frame.empty:
        return {}
    grouped = frame.groupby("day")["intensity"].agg(["count", "sum"])
    return {
        str(day): (int(row["count"]), int(row["sum"]))
        for day, row in grouped.iterrows()
    }


def calendar_heatmap(
    entries: Iterable[Any],
    today: date,
    tz: tzinfo = timezone.utc,
    lookback_days: int = DEFAULT_HEATMAP_LOOKBACK_DAYS,
    window_days: int = DEFAULT_HEATMAP_WINDOW_DAYS,
) -> list[HeatmapDay]:
    """crisis calendar: per day, how many severe events happened and how intense
    they were on average. the window opens on the first of the month that
    contains today - lookback_days."""
    start = (today - timedelta(days=lookback_days)).replace(day=1)

    frame = _daily_frame(entries, tz)
    severe = frame[frame["type"].isin(SEVERE_EVENT_TYPES)]
    totals = _daily_totals(severe)

    heatmap = []
    for offset in range(max(0, window_days)):
        day = (start + timedelta(days=offset)).isoformat()
        count, total = totals.get(day, (0, 0))
        intensity = int(round_half_up(total / count)) if count else 0
        heatmap.append(HeatmapDay(date=day, count=count, intensity=intensity))
    return heatmap


def intensity_trend(
    entries: Iterable[Any],
    today: date,
    tz: tzinfo = timezone.utc,
    days: int = DEFAULT_TREND_DAYS,
) -> list[TrendPoint]:
    """average intensity of all events per day for the last `days` days, oldest first"""
    totals = _daily_totals(_daily_frame(entries, tz))

    trend = []
    for offset in range(max(0, days) - 1, -1, -1):
        day = today - timedelta(days=offset)
        count, total = totals.get(day.isoformat(), (0, 0))
        intensity = round_half_up(total / count, 1) if count else 0.0
        trend.append(TrendPoint(date=day.isoformat(), intensity=intensity, label=day.strftime("%d/%m")))
    return trend


def trigger_distribution(entries: Iterable[Any]) -> list[TriggerShare]:
    """share of each trigger across the whole log, most frequent first.
    equal counts keep the order in which triggers were first seen."""
    counts = count_triggers(entries)
    total = sum(counts.values())
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        TriggerShare(
            trigger=trigger,
            label=label_for(trigger),
            color=color_for(trigger),
            count=count,
            percentage=_share(count, total),
        )
        for trigger, count in ranked
    ]


def location_distribution(entries: Iterable[Any]) -> list[LocationShare]:
    """where events happen, most frequent first"""
    counts: Counter = Counter()
    for entry in entries:
        location = entry_field(entry, "location")
        if isinstance(location, str) and location.strip():
            counts[location.strip()] += 1

    total = sum(counts.values())
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        LocationShare(location=location, count=count, percentage=_share(count, total))
        for location, count in ranked
    ]
