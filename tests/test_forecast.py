"""Tests for auroracompass.forecast (OVATION JSON parsing)."""

import json
from datetime import datetime, timezone

import pytest

from auroracompass.forecast import ForecastFormatError, forecast_time, points_from_ovation

OVATION = {
    "Observation Time": "2024-05-10T22:00:00Z",
    "Forecast Time": "2024-05-10T22:45:00Z",
    "Data Format": "[Longitude, Latitude, Aurora]",
    "coordinates": [
        [0, 65, 0],
        [200, 65, 30],
        [359, -70, 150],
        [180, 60, 12],
    ],
}


class TestPointsFromOvation:
    def test_drops_zero_cells_and_folds_longitude(self):
        points = points_from_ovation(OVATION)
        assert [(p.longitude, p.latitude, p.probability) for p in points] == [
            (-160.0, 65.0, 30.0),
            (-1.0, -70.0, 100.0),
            (-180.0, 60.0, 12.0),
        ]

    def test_accepts_json_text(self):
        assert len(points_from_ovation(json.dumps(OVATION))) == 3

    def test_min_probability(self):
        points = points_from_ovation(OVATION, min_probability=20.0)
        assert [p.probability for p in points] == [30.0, 100.0]

    def test_zero_threshold_keeps_everything(self):
        assert len(points_from_ovation(OVATION, min_probability=0.0)) == 4

    def test_stable_ids_survive_a_refresh(self):
        first = {p.stable_id for p in points_from_ovation(OVATION)}
        second = {p.stable_id for p in points_from_ovation(json.dumps(OVATION))}
        assert first == second

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2, 3]",
            {"coordinates": "nope"},
            {},
            {"coordinates": [[1, 2]]},
            {"coordinates": [["a", 2, 3]]},
            {"coordinates": ["123"]},
            {"coordinates": [{"lon": 1, "lat": 2, "p": 3}]},
            {"coordinates": [[10, 95, 3]]},
        ],
    )
    def test_malformed(self, payload):
        with pytest.raises(ForecastFormatError):
            points_from_ovation(payload)


class TestForecastTime:
    def test_parses_utc(self):
        assert forecast_time(OVATION) == datetime(2024, 5, 10, 22, 45, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert forecast_time({"Forecast Time": "2024-05-10T22:45:00"}).tzinfo == timezone.utc

    def test_missing(self):
        assert forecast_time({"coordinates": []}) is None

    def test_bad_value(self):
        with pytest.raises(ForecastFormatError):
            forecast_time({"Forecast Time": "yesterday"})
