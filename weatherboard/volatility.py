import math
from types import MappingProxyType
from typing import Iterable, Mapping

import pandas as pd

VOLATILITY_WEIGHTS = MappingProxyType(
    {
        "temperature": 0.4,
        "humidity": 0.2,
        "pressure": 0.2,
        "wind_speed": 0.2,
    }
)

# Reading columns feeding each metric.
METRIC_COLUMNS = {
    "temperature": "temperature_c",
    "humidity": "humidity_percent",
    "pressure": "pressure_hpa",
    "wind_speed": "wind_speed_ms",
}

DEFAULT_THRESHOLD = 5.0
MIN_SAMPLES = 2


def _validate_weights(weights: Mapping[str, float]) -> None:
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(f"Volatility weights must sum to 1.0 (got {total})")


_validate_weights(VOLATILITY_WEIGHTS)


def clean_samples(samples: Iterable[float | None] | None) -> list[float]:
    """
    Drop missing samples (None or NaN) and return the rest as floats.

    Infinite values raise ValueError rather than leaking into the mean.
    """
    if samples is None:
        return []
    cleaned = []
    for value in samples:
        if value is None:
            continue
        number = float(value)
        if math.isnan(number):
            continue
        if math.isinf(number):
            raise ValueError(f"Non-finite sample: {value}")
        cleaned.append(number)
    return cleaned


def population_std(samples: Iterable[float | None] | None) -> float:
    values = clean_samples(samples)
    if len(values) < MIN_SAMPLES:
        return 0.0
    return float(pd.Series(values, dtype="float64").std(ddof=0))


def metric_contributions(series: Mapping[str, Iterable[float | None] | None]) -> dict[str, float]:
    """Weighted std per metric; metrics without enough data contribute 0.0."""
    return {
        metric: weight * population_std(series.get(metric))
        for metric, weight in VOLATILITY_WEIGHTS.items()
    }


def compute_volatility(series: Mapping[str, Iterable[float | None] | None]) -> float:
    """
    Weighted sum of per-metric population standard deviations.

    The score is unbounded; callers clamp for display if they need to.
    """
    return float(sum(metric_contributions(series).values()))


def series_from_readings(df: pd.DataFrame | None) -> dict[str, list]:
    if df is None or df.empty:
        return {}
    series = {}
    for metric, column in METRIC_COLUMNS.items():
        if column not in df:
            continue
        values = pd.to_numeric(df[column], errors="coerce").dropna()
        series[metric] = values.tolist()
    return series


def volatility_level(score: float, threshold: float = DEFAULT_THRESHOLD) -> str:
    return "High" if score > threshold else "Low"
