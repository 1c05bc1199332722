# event models: behavioral event creation and response schemas
# events are immutable once logged, they can only be deleted by their owner

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from steadylog.models.taxonomy import EventType, Trigger

MAX_TRIGGERS = 10
MAX_NOTES_LENGTH = 1000
MAX_LOCATION_LENGTH = 200


class EventCreate(BaseModel):
    """payload for logging a behavioral event"""
    type: EventType = Field(..., description="event category")
    intensity: int = Field(..., ge=1, le=10, strict=True, description="intensity score 1-10")
    triggers: list[Trigger] = Field(default_factory=list, max_length=MAX_TRIGGERS)
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)
    location: Optional[str] = Field(None, max_length=MAX_LOCATION_LENGTH)
    timestamp: Optional[datetime] = Field(None, description="time of the event, defaults to now")

    model_config = {"populate_by_name": True}

    @field_validator("triggers")
    @classmethod
    def triggers_unique(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("triggers must not repeat")
        return value

    @field_validator("notes", "location", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class EventEntry(BaseModel):
    """a logged event as stored and returned by the api"""
    id: str
    owner_id: str = Field(..., alias="ownerId")
    timestamp: str
    type: str
    intensity: int
    triggers: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    location: Optional[str] = None
    created_at: str = Field("", alias="createdAt")
    type_label: str = Field("", alias="typeLabel")
    type_color: str = Field("", alias="typeColor")

    model_config = {"populate_by_name": True}
