"""
Plan Narrator Agent — writes the prose that accompanies a tanning plan.

Takes the profile, the weather and the advisory engine's results, returns a PlanNarrative.
Durations and SPF are passed in from the engine; the model only explains them.
"""

import os
from dataclasses import dataclass
from typing import Optional

from pydantic_ai import Agent, RunContext

from tanai.advisory import describe_risk
from tanai.config import get_settings
from tanai.schemas import (
    AdvisoryResult,
    ForecastSeries,
    PlanNarrative,
    TanningPlan,
    TanningProfile,
    WeatherSample,
)

settings = get_settings()

if settings.anthropic_api_key and not os.environ.get("ANTHROPIC_API_KEY"):
    os.environ["ANTHROPIC_API_KEY"] = settings.anthropic_api_key


@dataclass
class NarrativeDeps:
    """Everything the narrator needs for one plan."""

    profile: TanningProfile
    forecast: ForecastSeries
    current: WeatherSample
    advisory: AdvisoryResult
    plan: TanningPlan
    best_slot: Optional[WeatherSample] = None
    best_slot_advisory: Optional[AdvisoryResult] = None


plan_narrator_agent = Agent(
    settings.narrative_model,
    deps_type=NarrativeDeps,
    output_type=PlanNarrative,
    defer_model_check=True,
)


def _format_profile(p: TanningProfile, location_name: str) -> str:
    lines = [
        f"Gender: {p.gender.value}",
        f"Goal: {p.goal.value.replace('_', ' ')}",
        f"Current skin tone: {p.current_shade.label}",
        f"Target skin tone: {p.target_shade.label}",
        f"Tanning method: {p.method.value.replace('_', ' ')}",
        f"Frequency: {p.frequency.value}",
        f"Timeframe: {p.timeframe.value.replace('_', ' ')}",
        f"Location: {location_name}",
    ]
    return "\n".join(f"  - {line}" for line in lines)


def _format_conditions(deps: NarrativeDeps) -> str:
    c = deps.current
    a = deps.advisory
    lines = [
        f"Temperature: {c.temperature_celsius:.0f}°C",
        f"Weather: {c.condition_label}",
        f"UV index: {c.uv_index:g} ({describe_risk(a.risk_label)})",
        f"Cloud coverage: {c.cloud_coverage_percent:.0f}%",
        f"Recommended session now: {a.recommended_minutes} minutes"
        + ("" if a.is_safe else " (NOT SAFE — no session now)"),
        f"Recommended SPF: {a.recommended_spf.value}",
    ]
    if deps.best_slot is not None and deps.best_slot_advisory is not None:
        local = deps.best_slot.timestamp_utc + deps.forecast.utc_offset
        lines.append(
            f"Best slot in forecast: {local:%H:%M} local, UV {deps.best_slot.uv_index:g}, "
            f"{deps.best_slot_advisory.recommended_minutes} minutes"
        )
    else:
        lines.append("Best slot in forecast: none safe")
    if deps.forecast.is_fallback:
        lines.append("Live weather unavailable — these are default conditions")
    return "\n".join(f"  - {line}" for line in lines)


def _format_plan(plan: TanningPlan) -> str:
    return "\n".join(f"  {step.number}. {step.title} — {step.description}" for step in plan.steps)


@plan_narrator_agent.system_prompt
async def build_system_prompt(ctx: RunContext[NarrativeDeps]) -> str:
    deps = ctx.deps

    return f"""You are TanAI, a friendly tanning coach writing a short personalized plan summary.

USER PROFILE:
{_format_profile(deps.profile, deps.forecast.location_name)}

CONDITIONS AND RECOMMENDATION (already computed — do not change these numbers):
{_format_conditions(deps)}

STRUCTURED PLAN:
{_format_plan(deps.plan)}

YOUR TASK:
1. summary: a warm paragraph explaining the plan, using the numbers above as given
2. safety_notes: short safety precautions for these conditions
3. hydration_tip: one tip based on the temperature

Keep it concise and easy to read."""
