# patient link models: professional <-> family links redeemed from connection codes
# a nickname is private to the professional who set it

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class PatientLinkCreate(BaseModel):
    """payload a professional sends to redeem a connection code"""
    connection_code: str = Field(..., alias="connectionCode", min_length=2, max_length=20)
    nickname: Optional[str] = Field(None, max_length=100)

    model_config = {"populate_by_name": True}

    @field_validator("connection_code", mode="before")
    @classmethod
    def normalize_code(cls, value):
        # "a1b2c3", " #A1B2C3" and "A1B2C3" all mean "#A1B2C3"
        if not isinstance(value, str):
            return value
        code = value.strip().upper()
        if code and not code.startswith("#"):
            code = "#" + code
        return code

    @field_validator("nickname", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class NicknameUpdate(BaseModel):
    nickname: Optional[str] = Field(None, max_length=100)


class PatientSummary(BaseModel):
    """latest activity for a patient, shown on the professional home"""
    last_event_type: Optional[str] = Field(None, alias="lastEventType")
    last_event_label: Optional[str] = Field(None, alias="lastEventLabel")
    last_event_date: Optional[str] = Field(None, alias="lastEventDate")
    days_without_crisis: int = Field(0, alias="daysWithoutCrisis")
    total_events: int = Field(0, alias="totalEvents")

    model_config = {"populate_by_name": True}


class LinkedPatientResponse(BaseModel):
    id: str
    name: str
    nickname: Optional[str] = None
    display_name: str = Field(..., alias="displayName")
    linked_at: str = Field("", alias="linkedAt")
    summary: PatientSummary = Field(default_factory=PatientSummary)

    model_config = {"populate_by_name": True}


class ConnectionCodeResponse(BaseModel):
    connection_code: str = Field(..., alias="connectionCode")
    message: str = "Share this code with a professional so they can follow your log"

    model_config = {"populate_by_name": True}
