"""
AdvisorService — the main orchestrator.

Single entry point for plans: create_plan(profile, latitude, longitude)
Fetch weather (or fallback) → evaluate → best slot → structured plan → narrative.
All duration/SPF decisions go through the advisory engine.
"""

import logging
from datetime import time
from typing import Optional

from tanai.advisory import best_time_of_day, describe_risk, evaluate
from tanai.agents.plan_narrator import NarrativeDeps, plan_narrator_agent
from tanai.config import Settings
from tanai.schemas import (
    AdvisoryResult,
    ForecastSeries,
    PlanNarrative,
    PlanResponse,
    TanningProfile,
)
from tanai.services.plan_builder import build_plan
from tanai.services.weather import OpenWeatherClient, fallback_sample

logger = logging.getLogger(__name__)


class AdvisorService:
    """Routes a completed onboarding profile through weather, engine and narrative."""

    def __init__(self, settings: Settings, weather_client: Optional[OpenWeatherClient] = None):
        self.settings = settings
        self.weather_client = weather_client or OpenWeatherClient(settings)

    def current_advisory(self, profile: TanningProfile, forecast: ForecastSeries) -> AdvisoryResult:
        """Evaluate the forecast's current reading for the profile's current shade."""
        current = forecast.current or fallback_sample(self.settings)
        return evaluate(profile.current_shade, current)

    async def write_narrative(self, deps: NarrativeDeps) -> Optional[PlanNarrative]:
        """Ask the narrator for prose. Failures never break the plan."""
        try:
            result = await plan_narrator_agent.run(
                "Write the summary for my tanning plan.",
                deps=deps,
            )
            return result.output
        except Exception as e:
            logger.error(f"Plan narrative failed: {e}", exc_info=True)
            return None

    async def create_plan(
        self,
        profile: TanningProfile,
        latitude: float,
        longitude: float,
        with_narrative: bool = True,
    ) -> PlanResponse:
        # 1. Weather, never absent
        forecast = await self.weather_client.get_forecast_or_fallback(
            latitude, longitude, profile.location_name
        )
        current = forecast.current or fallback_sample(self.settings)

        # 2. Engine
        advisory = self.current_advisory(profile, forecast)
        best_slot = best_time_of_day(
            profile.current_shade,
            forecast.samples,
            forecast.utc_offset,
            start=time(self.settings.daylight_start_hour),
            end=time(self.settings.daylight_end_hour),
        )
        best_slot_advisory = evaluate(profile.current_shade, best_slot) if best_slot else None

        # 3. Structured plan
        plan = build_plan(profile, advisory, best_slot, forecast.utc_offset)

        # 4. Narrative
        narrative = None
        if with_narrative:
            narrative = await self.write_narrative(
                NarrativeDeps(
                    profile=profile,
                    forecast=forecast,
                    current=current,
                    advisory=advisory,
                    plan=plan,
                    best_slot=best_slot,
                    best_slot_advisory=best_slot_advisory,
                )
            )

        logger.info(
            f"Created plan | Shade: {profile.current_shade.value} | "
            f"Minutes: {advisory.recommended_minutes} | Risk: {advisory.risk_label.value} | "
            f"Fallback weather: {forecast.is_fallback}"
        )

        return PlanResponse(
            profile=profile,
            location_name=forecast.location_name,
            weather_is_fallback=forecast.is_fallback,
            current=current,
            advisory=advisory,
            risk_message=describe_risk(advisory.risk_label),
            best_slot=best_slot,
            best_slot_advisory=best_slot_advisory,
            plan=plan,
            narrative=narrative,
        )
