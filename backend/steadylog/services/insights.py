# insight aggregator: when events happen, what sets them off, and the weekly pattern
# pure and deterministic: no i/o, inputs are never mutated, the same log always
# gives the same result. malformed entries are skipped, never raised

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Iterable, Optional

from steadylog.config import settings
from steadylog.models.insights import (
    PatientInsights,
    PeriodCounts,
    PeriodInsight,
    TriggerInsight,
    WeeklyMatrix,
)
from steadylog.models.patient import PatientSummary
from steadylog.models.taxonomy import (
    NO_TRIGGER,
    PERIOD_DISPLAY,
    UNKNOWN_COLOR,
    color_for,
    is_severe,
    label_for,
)
from steadylog.services.event_log import count_triggers, entry_field, parse_timestamp, resolve_timezone
from steadylog.services import trends

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24


def period_of_hour(hour: int) -> str:
    """morning is [6, 12), afternoon [12, 18), everything else is night"""
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    return "night"


def _local_moments(entries: Iterable[Any], tz: tzinfo) -> list[datetime]:
    moments = []
    skipped = 0
    for entry in entries:
        moment = parse_timestamp(entry_field(entry, "timestamp"), tz)
        if moment is None:
            skipped += 1
            continue
        moments.append(moment)
    if skipped:
        logger.debug(f"Skipped {skipped} entries with unparseable timestamps")
    return moments


def dominant_period(entries: Iterable[Any], tz: tzinfo = timezone.utc) -> PeriodInsight:
    """the period of day with strictly the most events.
    a tie between periods, or an empty log, is 'mixed'."""
    counts = {"morning": 0, "afternoon": 0, "night": 0}
    for moment in _local_moments(entries, tz):
        counts[period_of_hour(moment.hour)] += 1

    best = max(counts.values())
    leaders = [period for period, count in counts.items() if count == best]
    period = leaders[0] if best > 0 and len(leaders) == 1 else "mixed"

    label, icon, color = PERIOD_DISPLAY[period]
    return PeriodInsight(
        period=period,
        label=label,
        icon=icon,
        color=color,
        counts=PeriodCounts(**counts),
    )


def dominant_trigger(entries: Iterable[Any]) -> TriggerInsight:
    """the most frequent trigger. ties go to the trigger seen first in the log."""
    top, top_count = None, 0
    for trigger, count in count_triggers(entries).items():
        if count > top_count:
            top, top_count = trigger, count

    if top is None:
        return TriggerInsight(trigger=NO_TRIGGER, label="No triggers recorded", color=UNKNOWN_COLOR, count=0)
    return TriggerInsight(trigger=top, label=label_for(top), color=color_for(top), count=top_count)


def weekly_matrix(entries: Iterable[Any], tz: tzinfo = timezone.utc) -> WeeklyMatrix:
    """count events per (day of week, hour). row 0 is sunday."""
    cells = [[0] * HOURS_PER_DAY for _ in range(DAYS_PER_WEEK)]
    total = 0
    for moment in _local_moments(entries, tz):
        cells[moment.isoweekday() % DAYS_PER_WEEK][moment.hour] += 1
        total += 1
    return WeeklyMatrix(cells=cells, total=total)


def summarize_patient(
    entries: Iterable[Any],
    today: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> PatientSummary:
    """latest event and days since the last severe episode.
    with no severe episode on record, days are counted from the first event."""
    dated = []
    for entry in entries:
        moment = parse_timestamp(entry_field(entry, "timestamp"), tz)
        if moment is not None:
            dated.append((moment, entry_field(entry, "type")))

    if not dated:
        return PatientSummary()

    today = today or datetime.now(tz).date()
    last_moment, last_type = max(dated, key=lambda item: item[0])
    severe = [moment for moment, event_type in dated if is_severe(event_type)]
    anchor = max(severe) if severe else min(moment for moment, _ in dated)

    return PatientSummary(
        lastEventType=last_type if isinstance(last_type, str) else None,
        lastEventLabel=label_for(last_type),
        lastEventDate=last_moment.isoformat(),
        daysWithoutCrisis=max(0, (today - anchor.date()).days),
        totalEvents=len(dated),
    )


def derive_insights(
    entries: Iterable[Any],
    patient_id: str = "",
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
    trend_days: Optional[int] = None,
) -> PatientInsights:
    """run every aggregator and generator over one event log"""
    entries = list(entries)
    tz = tz or resolve_timezone(settings.LOCAL_TIMEZONE)
    today = today or datetime.now(tz).date()

    valid = _local_moments(entries, tz)

    return PatientInsights(
        patientId=patient_id,
        totalEvents=len(entries),
        skippedEvents=len(entries) - len(valid),
        period=dominant_period(entries, tz),
        dominantTrigger=dominant_trigger(entries),
        weeklyMatrix=weekly_matrix(entries, tz),
        heatmap=trends.calendar_heatmap(
            entries,
            today,
            tz,
            lookback_days=settings.HEATMAP_LOOKBACK_DAYS,
            window_days=settings.HEATMAP_WINDOW_DAYS,
        ),
        trend=trends.intensity_trend(entries, today, tz, days=trend_days or settings.TREND_WINDOW_DAYS),
        triggerDistribution=trends.trigger_distribution(entries),
        locationDistribution=trends.location_distribution(entries),
        summary=summarize_patient(entries, today, tz),
        timezone=str(tz),
    )
