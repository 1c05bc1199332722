# session models: explicit identity context and the per-role view model
# the view model is a tagged union on "kind"

from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

from steadylog.models.event import EventEntry
from steadylog.models.patient import LinkedPatientResponse
from steadylog.models.taxonomy import Role


class SessionContext(BaseModel):
    """who is calling, resolved once per request from the bearer token"""
    user_id: str = Field(..., alias="userId")
    role: Role
    name: str = ""
    email: str = ""
    connection_code: Optional[str] = Field(None, alias="connectionCode")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_professional(self) -> bool:
        return self.role == "professional"


class FamilyView(BaseModel):
    kind: Literal["family"] = "family"
    user_id: str = Field(..., alias="userId")
    name: str
    connection_code: Optional[str] = Field(None, alias="connectionCode")
    recent_events: list[EventEntry] = Field(default_factory=list, alias="recentEvents")

    model_config = {"populate_by_name": True}


class ProfessionalView(BaseModel):
    kind: Literal["professional"] = "professional"
    user_id: str = Field(..., alias="userId")
    name: str
    patients: list[LinkedPatientResponse] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


ViewModel = Annotated[Union[FamilyView, ProfessionalView], Field(discriminator="kind")]
