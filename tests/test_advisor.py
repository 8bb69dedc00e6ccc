"""
Tests for AdvisorService and the plan narrator agent — LLM calls are mocked.

Tests cover:
  Engine results flow unchanged into the plan and the narrator prompt
  Weather fallback reaches the response flag
  A failing narrator never fails the plan
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic_ai.messages import ModelRequest, ModelResponse, ToolCallPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

from tanai.agents.plan_narrator import plan_narrator_agent
from tanai.config import Settings
from tanai.schemas import (
    ForecastSeries,
    PlanNarrative,
    SkinShade,
    SpfTier,
    TanningProfile,
    UvRisk,
    WeatherSample,
)
from tanai.services.advisor import AdvisorService
from tanai.services.weather import fallback_forecast


# ── Fixtures ────────────────────────────────────────────────────────────────


START = datetime(2025, 7, 1, 8, tzinfo=timezone.utc)


def _settings() -> Settings:
    return Settings(_env_file=None, openweather_api_key=None, anthropic_api_key=None)


def _profile(**overrides) -> TanningProfile:
    defaults = dict(
        current_shade=SkinShade.LIGHT,
        target_shade=SkinShade.MEDIUM,
        location_name="Sydney",
    )
    defaults.update(overrides)
    return TanningProfile(**defaults)


def _forecast(uvs: list[float], condition="Clear", fallback=False) -> ForecastSeries:
    samples = [
        WeatherSample(
            timestamp_utc=START + timedelta(hours=i),
            temperature_celsius=27,
            uv_index=uv,
            cloud_coverage_percent=10,
            condition_label=condition,
        )
        for i, uv in enumerate(uvs)
    ]
    return ForecastSeries(samples=samples, location_name="Sydney", is_fallback=fallback)


class FakeWeatherClient:
    def __init__(self, forecast: ForecastSeries):
        self.forecast = forecast
        self.calls = []

    async def get_forecast_or_fallback(self, latitude, longitude, location_name=None):
        self.calls.append((latitude, longitude, location_name))
        return self.forecast


def _service(forecast: ForecastSeries) -> AdvisorService:
    return AdvisorService(_settings(), weather_client=FakeWeatherClient(forecast))


def _narrative_response(summary: str = "Your plan is ready."):
    narrative = PlanNarrative(summary=summary, safety_notes=["Reapply SPF"], hydration_tip="Drink water")
    return ModelResponse(
        parts=[ToolCallPart(tool_name="final_result", args=narrative.model_dump(mode="json"))]
    )


# ── Service tests ───────────────────────────────────────────────────────────


class TestCurrentAdvisory:
    def test_evaluates_first_sample(self):
        service = _service(_forecast([9, 2]))
        advisory = service.current_advisory(_profile(), _forecast([9, 2]))
        assert advisory.recommended_minutes == 5
        assert advisory.risk_label == UvRisk.VERY_HIGH

    def test_uses_current_shade_not_target(self):
        service = _service(_forecast([5]))
        advisory = service.current_advisory(
            _profile(current_shade=SkinShade.DEEP, target_shade=SkinShade.DEEP), _forecast([5])
        )
        assert advisory.recommended_minutes == 20
        assert advisory.recommended_spf == SpfTier.FIFTEEN

    @pytest.mark.anyio
    async def test_create_plan_reports_current_advisory(self):
        forecast = _forecast([7, 1])
        service = _service(forecast)

        response = await service.create_plan(_profile(), 0, 0, with_narrative=False)

        assert response.advisory == service.current_advisory(_profile(), forecast)


class TestCreatePlan:
    @pytest.mark.anyio
    async def test_engine_results_in_response(self):
        service = _service(_forecast([9, 4, 2, 7]))

        response = await service.create_plan(_profile(), -33.87, 151.21, with_narrative=False)

        # Current reading is UV 9 for a light shade
        assert response.advisory.recommended_minutes == 5
        assert response.advisory.risk_label == UvRisk.VERY_HIGH
        assert response.advisory.recommended_spf == SpfTier.FIFTY_PLUS
        assert response.risk_message.startswith("Very high UV")
        # UV 2 at 10:00 gives the longest session
        assert response.best_slot.timestamp_utc == START + timedelta(hours=2)
        assert response.best_slot_advisory.recommended_minutes == 20
        assert response.plan.recommended_spf == SpfTier.FIFTY_PLUS
        assert response.narrative is None
        assert response.location_name == "Sydney"
        assert response.weather_is_fallback is False

    @pytest.mark.anyio
    async def test_passes_coordinates_and_location(self):
        client = FakeWeatherClient(_forecast([5]))
        service = AdvisorService(_settings(), weather_client=client)

        await service.create_plan(_profile(), 38.72, -9.14, with_narrative=False)

        assert client.calls == [(38.72, -9.14, "Sydney")]

    @pytest.mark.anyio
    async def test_unsafe_day(self):
        service = _service(_forecast([12, 11.5, 11], condition="Clear"))

        response = await service.create_plan(_profile(), 0, 0, with_narrative=False)

        assert response.advisory.is_safe is False
        assert response.best_slot is None
        assert response.best_slot_advisory is None
        assert "Wait for Safer Conditions" in [s.title for s in response.plan.steps]

    @pytest.mark.anyio
    async def test_fallback_weather_flagged(self):
        forecast = fallback_forecast(_settings(), START, location_name="Sydney")
        service = _service(forecast)

        response = await service.create_plan(_profile(), 0, 0, with_narrative=False)

        assert response.weather_is_fallback is True
        assert response.current.uv_index == 5
        assert response.advisory.recommended_minutes == 10

    @pytest.mark.anyio
    async def test_narrative_attached(self):
        service = _service(_forecast([5, 5]))

        with plan_narrator_agent.override(model=TestModel()):
            response = await service.create_plan(_profile(), 0, 0)

        assert isinstance(response.narrative, PlanNarrative)

    @pytest.mark.anyio
    async def test_narrative_failure_keeps_plan(self):
        def broken_model(messages, info: AgentInfo):
            raise RuntimeError("model unavailable")

        service = _service(_forecast([5, 5]))

        with plan_narrator_agent.override(model=FunctionModel(broken_model)):
            response = await service.create_plan(_profile(), 0, 0)

        assert response.narrative is None
        assert response.advisory.recommended_minutes == 10
        assert len(response.plan.steps) == 6


# ── Narrator prompt tests ───────────────────────────────────────────────────


class TestPlanNarrator:
    @pytest.mark.anyio
    async def test_prompt_carries_engine_numbers(self):
        captured_messages = []

        def mock_model(messages, info: AgentInfo):
            captured_messages.extend(messages)
            return _narrative_response()

        service = _service(_forecast([9, 4]))

        with plan_narrator_agent.override(model=FunctionModel(mock_model)):
            response = await service.create_plan(_profile(), 0, 0)

        assert response.narrative.summary == "Your plan is ready."

        prompt_text = str([m for m in captured_messages if isinstance(m, ModelRequest)])
        assert "Recommended session now: 5 minutes" in prompt_text
        assert "Recommended SPF: 50+" in prompt_text
        assert "Current skin tone: Light" in prompt_text
        assert "Target skin tone: Medium" in prompt_text

    @pytest.mark.anyio
    async def test_prompt_marks_unsafe_and_fallback(self):
        captured_messages = []

        def mock_model(messages, info: AgentInfo):
            captured_messages.extend(messages)
            return _narrative_response()

        forecast = _forecast([12], fallback=True)
        service = _service(forecast)

        with plan_narrator_agent.override(model=FunctionModel(mock_model)):
            await service.create_plan(_profile(), 0, 0)

        prompt_text = str(captured_messages)
        assert "NOT SAFE" in prompt_text
        assert "Best slot in forecast: none safe" in prompt_text
        assert "default conditions" in prompt_text
