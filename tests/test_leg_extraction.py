"""Tests for multi-leg extraction from provider metadata."""

from smartfill.domain.models import AutofillSuggestion, SegmentLeg
from smartfill.services.leg_extraction import (
    LEG_STRATEGIES,
    extract_legs,
    normalize_suggestion_legs,
)

from conftest import flight_entry


def _suggestion(metadata, **kwargs):
    return AutofillSuggestion(metadata=metadata, **kwargs)


def test_strategy_order():
    assert [name for name, _ in LEG_STRATEGIES] == [
        "flat_legs",
        "flight_legs",
        "stop_time_legs",
    ]


def test_no_metadata():
    assert extract_legs(AutofillSuggestion()) is None
    assert extract_legs(_suggestion({"status": "Expected"})) is None


class TestFlatLegs:
    def test_flat_records(self):
        legs = extract_legs(
            _suggestion(
                {
                    "legs": [
                        {
                            "origin": "Paris",
                            "destination": "Lyon",
                            "departureTime": "2025-03-01T08:00:00Z",
                            "arrival_time": "2025-03-01T10:00:00Z",
                            "carrier": "SNCF",
                            "number": "6201",
                            "seat": "12A",
                        }
                    ]
                }
            )
        )

        assert legs == [
            SegmentLeg(
                origin="Paris",
                destination="Lyon",
                departure_time="2025-03-01T08:00:00Z",
                arrival_time="2025-03-01T10:00:00Z",
                carrier="SNCF",
                number="6201",
                seat="12A",
            )
        ]

    def test_flat_legs_win_over_stop_times(self):
        """When both shapes are present, the explicit legs are used."""
        metadata = {
            "legs": [{"origin": "A", "destination": "B"}],
            "stop_times": [
                {"stop_point": {"name": "X"}},
                {"stop_point": {"name": "Y"}},
                {"stop_point": {"name": "Z"}},
            ],
        }

        legs = extract_legs(_suggestion(metadata))

        assert [(leg.origin, leg.destination) for leg in legs] == [("A", "B")]

    def test_non_record_entries_are_skipped(self):
        legs = extract_legs(_suggestion({"legs": ["A-B", None, {"origin": "C"}]}))
        assert legs == [SegmentLeg(origin="C")]


class TestFlightLegs:
    def test_flight_shaped_entries(self):
        suggestion = _suggestion(
            {
                "legs": [
                    flight_entry(
                        "Newark", "Denver", "2025-03-01 08:00-05:00", "2025-03-01 10:10-07:00"
                    ),
                    flight_entry(
                        "Denver",
                        "San Francisco",
                        "2025-03-01 11:00-07:00",
                        "2025-03-01 12:45-08:00",
                    ),
                ]
            },
            provider_name="United Airlines",
            transport_number="UA120",
        )

        legs = extract_legs(suggestion)

        assert [(leg.origin, leg.destination) for leg in legs] == [
            ("Newark", "Denver"),
            ("Denver", "San Francisco"),
        ]
        assert legs[0].departure_time == "2025-03-01 08:00-05:00"
        assert legs[1].arrival_time == "2025-03-01 12:45-08:00"
        assert {leg.carrier for leg in legs} == {"United Airlines"}
        assert {leg.number for leg in legs} == {"UA120"}

    def test_single_leg_object(self):
        entry = flight_entry("Oslo", "Bergen", "2025-03-01T07:00", "2025-03-01T08:00")
        legs = extract_legs(_suggestion({"leg": entry}))
        assert len(legs) == 1
        assert legs[0].origin == "Oslo"

    def test_local_time_preferred_over_utc(self):
        entry = {
            "departure": {
                "airportName": "Oslo",
                "scheduledTimeLocal": "2025-03-01 07:00+01:00",
                "scheduledTimeUtc": "2025-03-01 06:00Z",
            },
            "arrival": {
                "airportName": "Bergen",
                "scheduledTimeUtc": "2025-03-01 07:00Z",
            },
        }

        leg = extract_legs(_suggestion({"legs": [entry]}))[0]

        assert leg.origin == "Oslo"
        assert leg.departure_time == "2025-03-01 07:00+01:00"
        assert leg.arrival_time == "2025-03-01 07:00Z"


class TestStopTimeLegs:
    def test_consecutive_stops_become_legs(self):
        metadata = {
            "stop_times": [
                {
                    "stop_point": {"name": "Paris Gare de Lyon"},
                    "departure_date_time": "2025-03-01T08:00:00",
                },
                {
                    "stop_point": {"name": "Lyon Part-Dieu"},
                    "arrival_date_time": "2025-03-01T10:00:00",
                    "departure_date_time": "2025-03-01T10:05:00",
                },
                {"name": "Marseille", "arrival_date_time": "2025-03-01T11:40:00"},
            ]
        }

        legs = extract_legs(
            _suggestion(metadata, provider_name="SNCF", transport_number="6201")
        )

        assert legs == [
            SegmentLeg(
                origin="Paris Gare de Lyon",
                destination="Lyon Part-Dieu",
                departure_time="2025-03-01T08:00:00",
                arrival_time="2025-03-01T10:00:00",
                carrier="SNCF",
                number="6201",
            ),
            SegmentLeg(
                origin="Lyon Part-Dieu",
                destination="Marseille",
                departure_time="2025-03-01T10:05:00",
                arrival_time="2025-03-01T11:40:00",
                carrier="SNCF",
                number="6201",
            ),
        ]

    def test_single_stop_gives_nothing(self):
        assert extract_legs(_suggestion({"stop_times": [{"name": "Paris"}]})) is None


class TestNormalizeSuggestionLegs:
    def test_rewrites_legs_as_flat_records(self):
        entry = flight_entry("Newark", "Denver", "2025-03-01 08:00-05:00", "")
        suggestion = _suggestion({"legs": [entry], "status": "Expected"})

        normalized = normalize_suggestion_legs(suggestion)

        assert normalized.metadata["status"] == "Expected"
        assert normalized.metadata["legs"] == [
            {
                "origin": "Newark",
                "destination": "Denver",
                "departure_time": "2025-03-01 08:00-05:00",
                "arrival_time": None,
                "carrier": None,
                "number": None,
                "seat": None,
            }
        ]
        assert suggestion.metadata["legs"] == [entry]

    def test_without_legs_is_unchanged(self):
        suggestion = _suggestion({"status": "Expected"})
        assert normalize_suggestion_legs(suggestion) is suggestion

    def test_flat_records_are_stable(self):
        once = normalize_suggestion_legs(
            _suggestion({"legs": [{"origin": "A", "destination": "B"}]})
        )
        twice = normalize_suggestion_legs(once)
        assert twice.metadata == once.metadata
