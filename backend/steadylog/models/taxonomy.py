# event taxonomy: event types, triggers, and periods of day
# single source of truth for keys, display labels, and color classes
# referenced by request validation, the insight services, and api responses

from typing import Literal

EventType = Literal["crisis", "anxiety", "meltdown", "good_day"]
Trigger = Literal["noise", "sleep", "routine", "hunger", "anger", "social", "school", "transition"]
Role = Literal["family", "professional"]
Period = Literal["morning", "afternoon", "night", "mixed"]

EVENT_TYPES = ["crisis", "anxiety", "meltdown", "good_day"]
TRIGGERS = ["noise", "sleep", "routine", "hunger", "anger", "social", "school", "transition"]

# acute distress, counted by the crisis calendar
SEVERE_EVENT_TYPES = ("crisis", "meltdown")

NO_TRIGGER = "none"

EVENT_TYPE_LABELS = {
    "crisis": "Crisis",
    "anxiety": "Anxiety",
    "meltdown": "Meltdown",
    "good_day": "Good Day",
}

EVENT_TYPE_COLORS = {
    "crisis": "crisis",
    "anxiety": "anxiety",
    "meltdown": "meltdown",
    "good_day": "goodday",
}

TRIGGER_LABELS = {
    "noise": "Noise",
    "sleep": "Sleep",
    "routine": "Routine",
    "hunger": "Hunger",
    "anger": "Anger",
    "social": "Social",
    "school": "School",
    "transition": "Transition",
}

TRIGGER_COLORS = {
    "noise": "indigo",
    "sleep": "violet",
    "routine": "sky",
    "hunger": "amber",
    "anger": "rose",
    "social": "emerald",
    "school": "teal",
    "transition": "orange",
}

# period -> (label, icon, color)
PERIOD_DISPLAY = {
    "morning": ("Morning", "sunrise", "amber"),
    "afternoon": ("Afternoon", "sun", "orange"),
    "night": ("Night", "moon", "indigo"),
    "mixed": ("No clear pattern", "clock", "slate"),
}

UNKNOWN_LABEL = "Unknown"
UNKNOWN_COLOR = "gray"


def label_for(key) -> str:
    """display label for an event type, trigger, or period. unknown keys get a generic label"""
    if not isinstance(key, str):
        return UNKNOWN_LABEL
    if key in EVENT_TYPE_LABELS:
        return EVENT_TYPE_LABELS[key]
    if key in TRIGGER_LABELS:
        return TRIGGER_LABELS[key]
    if key in PERIOD_DISPLAY:
        return PERIOD_DISPLAY[key][0]
    return UNKNOWN_LABEL


def color_for(key) -> str:
    """color class for an event type, trigger, or period. unknown keys render gray"""
    if not isinstance(key, str):
        return UNKNOWN_COLOR
    if key in EVENT_TYPE_COLORS:
        return EVENT_TYPE_COLORS[key]
    if key in TRIGGER_COLORS:
        return TRIGGER_COLORS[key]
    if key in PERIOD_DISPLAY:
        return PERIOD_DISPLAY[key][2]
    return UNKNOWN_COLOR


def is_severe(event_type) -> bool:
    return event_type in SEVERE_EVENT_TYPES
