# medication models: schedule entries owned by a family account

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class MedicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="medication name")
    dosage: Optional[str] = Field(None, max_length=50, description="e.g. 10mg")
    schedule: Optional[str] = Field(None, max_length=50, description="time or frequency label")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("dosage", "schedule", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MedicationResponse(BaseModel):
    id: str
    owner_id: str = Field(..., alias="ownerId")
    name: str
    dosage: Optional[str] = None
    schedule: Optional[str] = None
    created_at: str = Field("", alias="createdAt")

    model_config = {"populate_by_name": True}
