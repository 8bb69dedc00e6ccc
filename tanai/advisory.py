"""
Advisory engine — turns a skin shade and a weather reading into a tanning recommendation.

Pure functions only: no I/O, no logging, no hidden state. Callers substitute the
fallback reading before calling in, so every input here is a real value.

UV bands are evaluated top-down from the most restrictive (>= 11) to the least;
the first match wins, so a UV value never falls into two bands.
"""

from datetime import time, timedelta
from typing import Iterable, Optional

from tanai.schemas import AdvisoryResult, SkinBand, SkinShade, SpfTier, UvRisk, WeatherSample
from tanai.shades import band_for

BASE_MINUTES: dict[SkinBand, int] = {
    SkinBand.LIGHT: 10,
    SkinBand.MEDIUM: 15,
    SkinBand.DARK: 20,
}

SPF_BY_BAND: dict[SkinBand, SpfTier] = {
    SkinBand.LIGHT: SpfTier.FIFTY_PLUS,
    SkinBand.MEDIUM: SpfTier.THIRTY,
    SkinBand.DARK: SpfTier.FIFTEEN,
}

RISK_MESSAGES: dict[UvRisk, str] = {
    UvRisk.EXTREME: "Extreme UV - Not safe to tan",
    UvRisk.VERY_HIGH: "Very high UV - Limited exposure recommended",
    UvRisk.HIGH: "High UV - Moderate exposure",
    UvRisk.MODERATE: "Moderate UV - Good conditions",
    UvRisk.LOW: "Low UV - Extended exposure possible",
}

EXTREME_UV = 11
VERY_HIGH_UV = 8
HIGH_UV = 6
LOW_UV = 2

MAX_SESSION_MINUTES = 30
CLOUDY_PERCENT = 70

DAYLIGHT_START = time(6, 0)
DAYLIGHT_END = time(18, 0)


def base_exposure_minutes(shade: SkinShade) -> int:
    return BASE_MINUTES[band_for(shade)]


def recommended_spf(shade: SkinShade) -> SpfTier:
    return SPF_BY_BAND[band_for(shade)]


def adjust_for_uv(base_minutes: int, uv_index: float) -> int:
    if uv_index >= EXTREME_UV:
        return 0
    if uv_index >= VERY_HIGH_UV:
        return max(5, base_minutes - 10)
    if uv_index >= HIGH_UV:
        return max(8, base_minutes - 5)
    if uv_index <= LOW_UV:
        return min(MAX_SESSION_MINUTES, base_minutes + 10)
    return base_minutes


def adjust_for_weather(minutes: int, cloud_coverage_percent: float, condition_label: str) -> int:
    # An unsafe UV reading is never overridden by weather
    if minutes == 0:
        return 0
    if cloud_coverage_percent > CLOUDY_PERCENT:
        return min(MAX_SESSION_MINUTES, minutes + 5)
    if condition_label.strip().lower() == "rain":
        return 0
    return minutes


def risk_label(uv_index: float) -> UvRisk:
    if uv_index >= EXTREME_UV:
        return UvRisk.EXTREME
    if uv_index >= VERY_HIGH_UV:
        return UvRisk.VERY_HIGH
    if uv_index >= HIGH_UV:
        return UvRisk.HIGH
    if uv_index <= LOW_UV:
        return UvRisk.LOW
    return UvRisk.MODERATE


def describe_risk(risk: UvRisk) -> str:
    return RISK_MESSAGES[risk]


def evaluate(shade: SkinShade, sample: WeatherSample) -> AdvisoryResult:
    """Exposure minutes, SPF tier and UV risk for one reading."""
    base = base_exposure_minutes(shade)
    minutes = adjust_for_weather(
        adjust_for_uv(base, sample.uv_index),
        sample.cloud_coverage_percent,
        sample.condition_label,
    )
    return AdvisoryResult(
        recommended_minutes=minutes,
        recommended_spf=recommended_spf(shade),
        risk_label=risk_label(sample.uv_index),
        is_safe=minutes > 0,
    )


def is_daylight(
    sample: WeatherSample,
    utc_offset: timedelta = timedelta(0),
    start: time = DAYLIGHT_START,
    end: time = DAYLIGHT_END,
) -> bool:
    """True when the sample's local wall-clock time is within [start, end]."""
    local = (sample.timestamp_utc + utc_offset).time()
    return start <= local <= end


def best_time_of_day(
    shade: SkinShade,
    samples: Iterable[WeatherSample],
    utc_offset: timedelta = timedelta(0),
    start: time = DAYLIGHT_START,
    end: time = DAYLIGHT_END,
) -> Optional[WeatherSample]:
    """Daylight sample allowing the longest safe session.

    Ties go to the earliest timestamp. Returns None when nothing in the
    daylight window is safe, including an empty series.
    """
    best: Optional[WeatherSample] = None
    best_minutes = 0
    for sample in samples:
        if not is_daylight(sample, utc_offset, start, end):
            continue
        minutes = evaluate(shade, sample).recommended_minutes
        if minutes == 0:
            continue
        if (
            best is None
            or minutes > best_minutes
            or (minutes == best_minutes and sample.timestamp_utc < best.timestamp_utc)
        ):
            best = sample
            best_minutes = minutes
    return best
