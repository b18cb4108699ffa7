"""
test_models.py - JSON decoding of the bundle, bulk and per-code payloads.
"""

import json
from datetime import datetime, timezone

import pytest

from errors import DecodeFailureError, FormatVersionError
from models import (
    IndividualSnapshot,
    Snapshot,
    decode_global_data,
    decode_individual_snapshot,
    decode_snapshot_data,
    encode_individual_snapshot,
)


class TestIndividualSnapshot:

    def test_decodes_payload(self, payload):
        isnap = decode_individual_snapshot(json.dumps(payload([1, 2], [10, 20])))
        assert isnap.snapshot == Snapshot(last_deaths=(1, 2), last_confirmed=(10, 20))
        assert isnap.time == datetime(2020, 10, 7, 12, 0, tzinfo=timezone.utc)
        assert isnap.version == 1

    def test_naive_time_is_utc(self, payload):
        isnap = decode_individual_snapshot(json.dumps(payload([1, 2], [1, 2], time="2020-10-07T08:30:00")))
        assert isnap.time.tzinfo is not None
        assert isnap.time.utcoffset().total_seconds() == 0

    def test_version_mismatch_is_reported(self, payload):
        with pytest.raises(FormatVersionError) as exc:
            decode_individual_snapshot(json.dumps(payload([1, 2], [1, 2], version=2)))
        assert exc.value.found == 2
        assert exc.value.expected == 1

    def test_version_error_is_a_decode_failure(self):
        assert issubclass(FormatVersionError, DecodeFailureError)

    @pytest.mark.parametrize("content", [
        "not json",
        "[1, 2, 3]",
        json.dumps({"time": "2020-10-07T00:00:00Z", "version": 1}),
        json.dumps({"time": "yesterday", "version": 1,
                    "snapshot": {"lastDeaths": [1], "lastConfirmed": [1]}}),
        json.dumps({"time": "2020-10-07T00:00:00Z", "version": 1,
                    "snapshot": {"lastDeaths": [1, "2"], "lastConfirmed": [1, 2]}}),
        json.dumps({"time": "2020-10-07T00:00:00Z", "version": 1,
                    "snapshot": {"lastConfirmed": [1, 2]}}),
        json.dumps({"time": "2020-10-07T00:00:00Z", "version": 1,
                    "snapshot": {"lastDeaths": [1, 2, 3], "lastConfirmed": [1, 2]}}),
        json.dumps({"time": "2020-10-07T00:00:00Z", "version": "1",
                    "snapshot": {"lastDeaths": [1], "lastConfirmed": [1]}}),
    ])
    def test_malformed_payloads(self, content):
        with pytest.raises(DecodeFailureError):
            decode_individual_snapshot(content)

    def test_series_of_different_lengths_are_rejected(self, payload):
        with pytest.raises(DecodeFailureError, match="lastConfirmed"):
            decode_individual_snapshot(json.dumps(payload([1, 2, 3], [10, 20])))

    def test_encode_then_decode(self):
        isnap = IndividualSnapshot(
            snapshot=Snapshot(last_deaths=(3, 4), last_confirmed=(30, 45)),
            time=datetime(2020, 10, 7, tzinfo=timezone.utc),
        )
        assert decode_individual_snapshot(encode_individual_snapshot(isnap)) == isnap


class TestSnapshotData:

    def test_decodes_bulk_file(self):
        data = decode_snapshot_data(json.dumps({
            "time": "2020-10-07T00:00:00Z",
            "version": 1,
            "snapshots": {
                "France": {"lastDeaths": [1, 2], "lastConfirmed": [3, 4]},
                "NY": {"lastDeaths": [5, 6], "lastConfirmed": [7, 8]},
            },
        }))
        assert set(data.snapshots) == {"France", "NY"}
        assert data.snapshots["NY"].last_confirmed == (7, 8)


class TestGlobalData:

    def test_decodes_locations_with_wire_spelling(self):
        data = decode_global_data(json.dumps({
            "time": "2020-10-07T00:00:00Z",
            "version": 1,
            "globals": {
                "17031": {"title": "Cook", "admin": "Cook", "proviceState": "Illinois",
                          "countryRegion": "US", "lat": "41.8", "long": "-87.8"},
            },
        }))
        cook = data.globals["17031"]
        assert cook.province_state == "Illinois"
        assert cook.country_region == "US"
        assert cook.admin == "Cook"

    def test_missing_fields_decode_as_none(self):
        data = decode_global_data(json.dumps({"version": 1, "globals": {"X": {"title": "X"}}}))
        assert data.globals["X"].admin is None
        assert data.globals["X"].lat is None
