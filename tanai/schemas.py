"""
Pydantic schemas — the single source of truth for all data contracts.

WeatherSample and AdvisoryResult are the advisory engine's input/output contract.
TanningProfile is the handoff contract between onboarding and plan generation.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ── Enums ────────────────────────────────────────────────────────────────────


class SkinShade(str, enum.Enum):
    """Six shades, lightest to darkest. Declaration order is the depth order."""

    VERY_LIGHT = "very_light"
    LIGHT = "light"
    LIGHT_MEDIUM = "light_medium"
    MEDIUM = "medium"
    MEDIUM_DEEP = "medium_deep"
    DEEP = "deep"

    @property
    def order(self) -> int:
        return list(SkinShade).index(self)

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class SkinBand(str, enum.Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    DARK = "dark"


class SpfTier(str, enum.Enum):
    FIFTEEN = "15"
    THIRTY = "30"
    FIFTY_PLUS = "50+"

    @property
    def rank(self) -> int:
        return list(SpfTier).index(self)


class UvRisk(str, enum.Enum):
    EXTREME = "extreme"
    VERY_HIGH = "very_high"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class TanningGoal(str, enum.Enum):
    LIGHT_TAN = "light_tan"
    MEDIUM_TAN = "medium_tan"
    DEEP_TAN = "deep_tan"
    MAINTAIN_CURRENT = "maintain_current"


class Timeframe(str, enum.Enum):
    TWO_WEEKS = "2_weeks"
    THREE_WEEKS = "3_weeks"
    FOUR_WEEKS = "4_weeks"
    ONGOING = "ongoing_maintenance"


class TanningMethod(str, enum.Enum):
    NATURAL_SUN = "natural_sun"
    TANNING_BED = "tanning_bed"
    COMBINATION = "combination"


class SessionFrequency(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    OCCASIONALLY = "occasionally"


# ── Weather inputs ───────────────────────────────────────────────────────────


class WeatherSample(BaseModel):
    """A single reading from the weather provider. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    timestamp_utc: datetime
    temperature_celsius: float
    uv_index: float = Field(ge=0)
    cloud_coverage_percent: float = Field(ge=0, le=100)
    condition_label: str

    @field_validator("timestamp_utc")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are taken to already be UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class ForecastSeries(BaseModel):
    """Current reading plus the hourly forecast for one location."""

    samples: list[WeatherSample] = Field(default_factory=list)
    utc_offset_seconds: int = 0
    location_name: str = "Unknown Location"
    is_fallback: bool = False

    @property
    def current(self) -> Optional[WeatherSample]:
        return self.samples[0] if self.samples else None

    @property
    def utc_offset(self) -> timedelta:
        return timedelta(seconds=self.utc_offset_seconds)


# ── Engine output ────────────────────────────────────────────────────────────


class AdvisoryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    recommended_minutes: int = Field(ge=0, description="0 means do not tan now")
    recommended_spf: SpfTier
    risk_label: UvRisk
    is_safe: bool

    @model_validator(mode="after")
    def _safe_iff_minutes(self) -> "AdvisoryResult":
        if self.is_safe != (self.recommended_minutes > 0):
            raise ValueError("is_safe must be false exactly when recommended_minutes is 0")
        return self


# ── Onboarding profile ───────────────────────────────────────────────────────


class TanningProfile(BaseModel):
    """Answers collected by the onboarding wizard, fixed for the session."""

    model_config = ConfigDict(frozen=True)

    gender: Gender = Gender.OTHER
    goal: TanningGoal = TanningGoal.LIGHT_TAN
    timeframe: Timeframe = Timeframe.FOUR_WEEKS
    current_shade: SkinShade
    target_shade: SkinShade
    method: TanningMethod = TanningMethod.NATURAL_SUN
    frequency: SessionFrequency = SessionFrequency.WEEKLY
    location_name: Optional[str] = None

    @model_validator(mode="after")
    def _target_not_lighter(self) -> "TanningProfile":
        if self.target_shade.order < self.current_shade.order:
            raise ValueError(
                f"target shade '{self.target_shade.label}' is lighter than "
                f"current shade '{self.current_shade.label}'"
            )
        return self


# ── Plan output ──────────────────────────────────────────────────────────────


class PlanStep(BaseModel):
    number: int
    title: str
    description: str
    category: str = Field(description="e.g. 'preparation', 'protection', 'exposure'")


class MaintenancePlan(BaseModel):
    frequency: str
    duration_minutes: str = Field(description="e.g. '15-20'")
    spf: SpfTier
    tips: list[str] = Field(default_factory=list)


class TanningPlan(BaseModel):
    """Structured plan built deterministically from the profile and the advisory."""

    steps: list[PlanStep] = Field(default_factory=list)
    maintenance: MaintenancePlan
    recommended_spf: SpfTier
    sessions_per_week: str
    timeline_days: Optional[int] = Field(
        default=None, description="None for ongoing maintenance"
    )


class PlanNarrative(BaseModel):
    """Free-text guidance written by the narrative agent. Display only."""

    summary: str = Field(description="Warm, personalized paragraph about the plan")
    safety_notes: list[str] = Field(default_factory=list)
    hydration_tip: str = ""


class PlanResponse(BaseModel):
    profile: TanningProfile
    location_name: str
    weather_is_fallback: bool
    current: WeatherSample
    advisory: AdvisoryResult
    risk_message: str
    best_slot: Optional[WeatherSample] = None
    best_slot_advisory: Optional[AdvisoryResult] = None
    plan: TanningPlan
    narrative: Optional[PlanNarrative] = None


# ── API request/response types ───────────────────────────────────────────────


class ShadeInfo(BaseModel):
    shade: SkinShade
    label: str
    order: int
    band: SkinBand
    fitzpatrick: str


class EvaluateRequest(BaseModel):
    shade: SkinShade
    sample: WeatherSample


class EvaluateResponse(BaseModel):
    advisory: AdvisoryResult
    risk_message: str


class BestTimeRequest(BaseModel):
    shade: SkinShade
    samples: list[WeatherSample] = Field(default_factory=list)
    utc_offset_seconds: int = 0


class BestTimeResponse(BaseModel):
    best: Optional[WeatherSample] = None
    advisory: Optional[AdvisoryResult] = None


class PlanRequest(BaseModel):
    profile: TanningProfile
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    include_narrative: bool = True
