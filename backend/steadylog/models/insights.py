# insight models: derived analytics over a patient's event log
# plain records the dashboard renders directly, no nan or missing values

from pydantic import BaseModel, Field

from steadylog.models.patient import PatientSummary


class PeriodCounts(BaseModel):
    morning: int = 0
    afternoon: int = 0
    night: int = 0


class PeriodInsight(BaseModel):
    """the part of the day when events cluster"""
    period: str
    label: str
    icon: str
    color: str
    counts: PeriodCounts = Field(default_factory=PeriodCounts)


class TriggerInsight(BaseModel):
    """most frequent trigger, or the 'none' sentinel"""
    trigger: str
    label: str
    color: str
    count: int = 0


class WeeklyMatrix(BaseModel):
    """7x24 occurrence grid, rows are days of week (0=sunday), columns hours"""
    cells: list[list[int]]
    total: int = 0


class HeatmapDay(BaseModel):
    date: str
    count: int
    intensity: int


class TrendPoint(BaseModel):
    date: str
    intensity: float
    label: str


class TriggerShare(BaseModel):
    trigger: str
    label: str
    color: str
    count: int
    percentage: int


class LocationShare(BaseModel):
    location: str
    count: int
    percentage: int


class PatientInsights(BaseModel):
    """every derived view for a patient dashboard"""
    patient_id: str = Field("", alias="patientId")
    total_events: int = Field(0, alias="totalEvents")
    skipped_events: int = Field(0, alias="skippedEvents")
    period: PeriodInsight
    dominant_trigger: TriggerInsight = Field(..., alias="dominantTrigger")
    weekly_matrix: WeeklyMatrix = Field(..., alias="weeklyMatrix")
    heatmap: list[HeatmapDay] = Field(default_factory=list)
    trend: list[TrendPoint] = Field(default_factory=list)
    trigger_distribution: list[TriggerShare] = Field(default_factory=list, alias="triggerDistribution")
    location_distribution: list[LocationShare] = Field(default_factory=list, alias="locationDistribution")
    summary: PatientSummary = Field(default_factory=PatientSummary)
    timezone: str = "UTC"

    model_config = {"populate_by_name": True}
