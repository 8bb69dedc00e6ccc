"""
Plan builder — the step-by-step tanning plan and maintenance plan.

SPF figures, and the first session length when a current advisory is given,
come from the advisory engine. The band tables only describe the ramp-up and
maintenance durations.
"""

from datetime import timedelta
from typing import Optional

from tanai.advisory import recommended_spf
from tanai.schemas import (
    AdvisoryResult,
    MaintenancePlan,
    PlanStep,
    SessionFrequency,
    SkinBand,
    Timeframe,
    TanningPlan,
    TanningProfile,
    WeatherSample,
)
from tanai.shades import band_for

INITIAL_EXPOSURE: dict[SkinBand, str] = {
    SkinBand.LIGHT: "5-10",
    SkinBand.MEDIUM: "10-15",
    SkinBand.DARK: "15-20",
}

GRADUAL_INCREASE: dict[SkinBand, str] = {
    SkinBand.LIGHT: "2-3",
    SkinBand.MEDIUM: "3-5",
    SkinBand.DARK: "5-7",
}

MAINTENANCE_DURATION: dict[SkinBand, str] = {
    SkinBand.LIGHT: "15-20",
    SkinBand.MEDIUM: "20-25",
    SkinBand.DARK: "25-30",
}

SESSION_CADENCE: dict[SessionFrequency, str] = {
    SessionFrequency.DAILY: "daily",
    SessionFrequency.WEEKLY: "2-3 times per week",
    SessionFrequency.OCCASIONALLY: "once per week",
}

MAINTENANCE_CADENCE: dict[SessionFrequency, str] = {
    SessionFrequency.DAILY: "2-3 times per week",
    SessionFrequency.WEEKLY: "once per week",
    SessionFrequency.OCCASIONALLY: "every other week",
}

SESSIONS_PER_WEEK: dict[SessionFrequency, str] = {
    SessionFrequency.DAILY: "7",
    SessionFrequency.WEEKLY: "2-3",
    SessionFrequency.OCCASIONALLY: "1",
}

TIMEFRAME_WEEKS: dict[Timeframe, Optional[int]] = {
    Timeframe.TWO_WEEKS: 2,
    Timeframe.THREE_WEEKS: 3,
    Timeframe.FOUR_WEEKS: 4,
    Timeframe.ONGOING: None,
}

MAINTENANCE_TIPS = [
    "Maintain regular moisturizing routine",
    "Continue using appropriate SPF protection",
    "Stay hydrated before and after sessions",
    "Monitor skin health regularly",
]


def sessions_per_week(frequency: SessionFrequency) -> str:
    return SESSIONS_PER_WEEK[frequency]


def timeline_days(timeframe: Timeframe) -> Optional[int]:
    weeks = TIMEFRAME_WEEKS[timeframe]
    return None if weeks is None else weeks * 7


def _format_hour(sample: WeatherSample, utc_offset: timedelta) -> str:
    hour = (sample.timestamp_utc + utc_offset).hour
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12} {suffix}"


def build_maintenance(profile: TanningProfile) -> MaintenancePlan:
    band = band_for(profile.current_shade)
    return MaintenancePlan(
        frequency=MAINTENANCE_CADENCE[profile.frequency],
        duration_minutes=MAINTENANCE_DURATION[band],
        spf=recommended_spf(profile.current_shade),
        tips=list(MAINTENANCE_TIPS),
    )


def build_plan(
    profile: TanningProfile,
    advisory: Optional[AdvisoryResult] = None,
    best_slot: Optional[WeatherSample] = None,
    utc_offset: timedelta = timedelta(0),
) -> TanningPlan:
    """Build the ordered plan for a profile.

    `advisory` is the evaluation of the current reading; when it is unsafe a
    waiting step is added, when safe its minutes set the first session.
    `best_slot` names the hour to aim for.
    """
    band = band_for(profile.current_shade)
    spf = recommended_spf(profile.current_shade)

    entries: list[tuple[str, str, str]] = [
        (
            "Skin Preparation",
            "Exfoliate your skin and moisturize well 24 hours before starting your tanning routine.",
            "preparation",
        ),
        (
            "SPF Protection",
            f"Apply SPF {spf.value} 30 minutes before sun exposure.",
            "protection",
        ),
    ]

    if advisory is not None and not advisory.is_safe:
        entries.append((
            "Wait for Safer Conditions",
            "Current conditions are not suitable for tanning. Skip today's session "
            "and try again when UV levels are more favorable.",
            "safety",
        ))

    if best_slot is not None:
        window = f"around {_format_hour(best_slot, utc_offset)}, your best slot in the forecast"
    else:
        window = "during optimal UV hours (10 AM - 4 PM)"
    if advisory is not None and advisory.is_safe:
        first_session = str(advisory.recommended_minutes)
    else:
        first_session = INITIAL_EXPOSURE[band]
    entries.append((
        "Initial Exposure",
        f"Start with {first_session} minutes of sun exposure {window}.",
        "exposure",
    ))

    entries.append((
        "Gradual Increase",
        f"Increase exposure time by {GRADUAL_INCREASE[band]} minutes every other session.",
        "progression",
    ))
    entries.append((
        "Regular Sessions",
        f"Maintain {SESSION_CADENCE[profile.frequency]} tanning sessions at your target duration.",
        "routine",
    ))
    entries.append((
        "Progress Assessment",
        "Take progress photos every week to track your tanning journey.",
        "tracking",
    ))

    steps = [
        PlanStep(number=i, title=title, description=description, category=category)
        for i, (title, description, category) in enumerate(entries, start=1)
    ]

    return TanningPlan(
        steps=steps,
        maintenance=build_maintenance(profile),
        recommended_spf=spf,
        sessions_per_week=sessions_per_week(profile.frequency),
        timeline_days=timeline_days(profile.timeframe),
    )
