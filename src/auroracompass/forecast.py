"""Forecast snapshot parsing — NOAA OVATION aurora JSON to GeoPoints."""

import json
import logging
from datetime import datetime, timezone

from auroracompass.models import GeoPoint

log = logging.getLogger(__name__)


class ForecastFormatError(Exception):
    """Forecast payload does not have the expected shape."""


def _load(payload: dict | str | bytes) -> dict:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise ForecastFormatError(f"not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ForecastFormatError("payload must be a JSON object")
    return payload


def points_from_ovation(
    payload: dict | str | bytes, min_probability: float = 1.0
) -> list[GeoPoint]:
    """Parse an OVATION aurora forecast into GeoPoints.

    The ``coordinates`` array holds ``[longitude, latitude, probability]``
    triples with longitudes in 0–359. Longitudes are folded to [-180, 180)
    and probabilities clamped to [0, 100].

    Args:
        payload: Decoded JSON object, or raw JSON text.
        min_probability: Cells below this probability are dropped.

    Returns:
        GeoPoints in payload order.

    Raises:
        ForecastFormatError: When the payload or a coordinate row is malformed.
    """
    data = _load(payload)
    rows = data.get("coordinates")
    if not isinstance(rows, list):
        raise ForecastFormatError("missing 'coordinates' array")

    points: list[GeoPoint] = []
    for i, row in enumerate(rows):
        if not isinstance(row, (list, tuple)):
            raise ForecastFormatError(f"bad coordinate row {i}: {row!r}")
        try:
            lon, lat, prob = (float(v) for v in row)
        except (TypeError, ValueError) as exc:
            raise ForecastFormatError(f"bad coordinate row {i}: {row!r}") from exc
        if not -90.0 <= lat <= 90.0:
            raise ForecastFormatError(f"latitude out of range in row {i}: {lat}")
        prob = min(100.0, max(0.0, prob))
        if prob < min_probability:
            continue
        lon = (lon + 180.0) % 360.0 - 180.0
        points.append(GeoPoint(latitude=lat, longitude=lon, probability=prob))

    log.info("Parsed %d forecast points (%d rows)", len(points), len(rows))
    return points


def forecast_time(payload: dict | str | bytes) -> datetime | None:
    """UTC time the forecast is valid for, or None when absent."""
    raw = _load(payload).get("Forecast Time")
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError as exc:
        raise ForecastFormatError(f"bad 'Forecast Time': {raw!r}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
