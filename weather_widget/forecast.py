# ABOUTME: Reduces the provider's 3-hour forecast series to one sample per calendar day.
# ABOUTME: Prefers the noon sample of each day and falls back to the first sample of each day.

from collections.abc import Iterable

from weather_widget.models import DailyForecastSample, RawForecastSample

FORECAST_DAYS = 5
NOON = "12:00:00"


def normalize(samples: Iterable[RawForecastSample]) -> list[DailyForecastSample]:
    """Pick one representative sample per day, at most FORECAST_DAYS, ascending by timestamp.

    Noon samples are used when they cover FORECAST_DAYS distinct dates. Otherwise every
    noon pick is discarded and the first sample seen for each date is used instead.
    """
    samples = list(samples)

    selected = _first_per_date(s for s in samples if s.time_of_day == NOON)
    if len(selected) < FORECAST_DAYS:
        selected = _first_per_date(samples)

    selected.sort(key=lambda s: s.dt)
    return selected[:FORECAST_DAYS]


def _first_per_date(samples: Iterable[RawForecastSample]) -> list[RawForecastSample]:
    seen: set[str] = set()
    result = []
    for sample in samples:
        if sample.date_key not in seen:
            seen.add(sample.date_key)
            result.append(sample)
    return result
