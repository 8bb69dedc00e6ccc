"""
Weather/UV provider — OpenWeather One Call client plus the documented fallback reading.

The advisory engine never sees a failed fetch: get_forecast_or_fallback always
returns a ForecastSeries, substituting the fallback reading when the provider
is unreachable, unconfigured, or returns something malformed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx

from tanai.config import Settings
from tanai.schemas import ForecastSeries, WeatherSample

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: Optional[float] = None) -> float:
    value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


def _sample_from_entry(entry: Any) -> WeatherSample:
    if not isinstance(entry, dict):
        raise ValueError(
            f"Unexpected response from OpenWeather: reading is {type(entry).__name__}, not an object"
        )
    weather = entry.get("weather") or [{}]
    if not isinstance(weather, list) or not isinstance(weather[0], dict):
        raise ValueError("Unexpected response from OpenWeather: 'weather' is not a list of objects")
    return WeatherSample(
        timestamp_utc=datetime.fromtimestamp(int(entry["dt"]), tz=timezone.utc),
        temperature_celsius=float(entry["temp"]),
        uv_index=_clamp(float(entry.get("uvi") or 0.0), 0.0),
        cloud_coverage_percent=_clamp(float(entry.get("clouds") or 0.0), 0.0, 100.0),
        condition_label=weather[0].get("main") or "Clear",
    )


def parse_one_call(payload: Dict[str, Any], location_name: str) -> ForecastSeries:
    """Convert a One Call response into a series: current reading first, then hourly."""
    if not isinstance(payload, dict):
        raise ValueError("Unexpected response from OpenWeather: payload is not an object")
    if "current" not in payload or "hourly" not in payload:
        raise ValueError("Unexpected response from OpenWeather: 'current' or 'hourly' block missing")
    if not isinstance(payload["hourly"], list):
        raise ValueError("Unexpected response from OpenWeather: 'hourly' is not a list")

    samples = [_sample_from_entry(payload["current"])]
    samples.extend(_sample_from_entry(hour) for hour in payload["hourly"])

    return ForecastSeries(
        samples=samples,
        utc_offset_seconds=int(payload.get("timezone_offset") or 0),
        location_name=location_name,
    )


def fallback_sample(settings: Settings, now: Optional[datetime] = None) -> WeatherSample:
    now = now or datetime.now(timezone.utc)
    return WeatherSample(
        timestamp_utc=now.replace(minute=0, second=0, microsecond=0),
        temperature_celsius=settings.fallback_temperature_celsius,
        uv_index=settings.fallback_uv_index,
        cloud_coverage_percent=settings.fallback_cloud_coverage_percent,
        condition_label=settings.fallback_condition,
    )


def fallback_forecast(
    settings: Settings,
    now: Optional[datetime] = None,
    hours: int = 24,
    location_name: Optional[str] = None,
) -> ForecastSeries:
    """A flat forecast of the fallback reading, one sample per hour."""
    first = fallback_sample(settings, now)
    samples = [
        first.model_copy(update={"timestamp_utc": first.timestamp_utc + timedelta(hours=i)})
        for i in range(hours)
    ]
    return ForecastSeries(
        samples=samples,
        location_name=location_name or settings.fallback_location_name,
        is_fallback=True,
    )


class OpenWeatherClient:
    """Fetches current conditions and the hourly forecast for a coordinate."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def get_forecast(
        self, latitude: float, longitude: float, location_name: Optional[str] = None
    ) -> ForecastSeries:
        params = {
            "lat": latitude,
            "lon": longitude,
            "appid": self.settings.openweather_api_key,
            "units": "metric",
            "exclude": "minutely",
        }

        async with httpx.AsyncClient(
            timeout=self.settings.weather_timeout_seconds, transport=self.transport
        ) as client:
            response = await client.get(self.settings.openweather_base_url, params=params)
            response.raise_for_status()
            data = response.json()

        return parse_one_call(data, location_name or self.settings.fallback_location_name)

    async def get_forecast_or_fallback(
        self, latitude: float, longitude: float, location_name: Optional[str] = None
    ) -> ForecastSeries:
        if not self.settings.openweather_api_key:
            logger.warning("No OpenWeather API key configured — using fallback reading")
            return fallback_forecast(self.settings, location_name=location_name)

        try:
            forecast = await self.get_forecast(latitude, longitude, location_name)
        except httpx.HTTPError as e:
            logger.warning(f"Weather fetch failed, using fallback reading: {e}")
            return fallback_forecast(self.settings, location_name=location_name)
        except (ValueError, KeyError, TypeError, IndexError) as e:
            logger.warning(f"Malformed weather payload, using fallback reading: {e}")
            return fallback_forecast(self.settings, location_name=location_name)

        logger.info(
            f"Fetched forecast | Location: {forecast.location_name} | Samples: {len(forecast.samples)}"
        )
        return forecast
