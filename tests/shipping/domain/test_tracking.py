"""Tests for consignment tracking and response normalization."""

import json

import pytest
from shipping.courier.errors import CourierConfigurationError, TrackingExhaustedError
from shipping.courier.tracking import normalize_tracking, track_by_consignment_number

API_PASSWORD = "test-api-password"

TRACKED = {
    "status": 1,
    "booked_packet_tracking_detail": [
        {"date": "2026-10-01 10:00", "status": "Booked", "origin_city": "Lahore"},
        {"date": "2026-10-02 09:30", "status": "Arrived at Station", "origin_city": "Karachi"},
    ],
}


class TestNormalizeTracking:
    def test_status_and_city_from_latest_event(self):
        report = normalize_tracking("LE123", TRACKED)
        assert report.status == "Arrived at Station"
        assert report.current_city == "Karachi"
        assert report.last_event_at == "2026-10-02 09:30"
        assert len(report.events) == 2

    def test_packet_list_response(self):
        raw = {
            "status": 1,
            "packet_list": [
                {"booked_packet_status": "Pickup Request Sent", "origin_city_name": "Lahore", "booking_date": "01/10/2026"}
            ],
        }
        report = normalize_tracking("LE123", raw)
        assert report.status == "Pickup Request Sent"
        assert report.current_city == "Lahore"
        assert report.last_event_at == "01/10/2026"
        assert report.events == []

    def test_capitalized_event_keys(self):
        raw = {"Tracking Detail": [{"Date": "2026-10-03", "Status": "Delivered", "Origin": "Multan"}]}
        report = normalize_tracking("LE123", raw)
        assert report.status == "Delivered"
        assert report.events[0].origin == "Multan"

    def test_unknown_status(self):
        report = normalize_tracking("LE123", {"status": 1})
        assert report.status == "Unknown"
        assert report.current_city is None

    def test_to_dict_uses_api_names(self):
        data = normalize_tracking("LE123", TRACKED).to_dict()
        assert set(data) == {"cn", "status", "currentCity", "lastEventAt", "events"}
        assert data["events"][0]["status"] == "Booked"


class TestTrackByConsignmentNumber:
    def test_first_variant_success_stops(self, settings, fake_http):
        fake_http.script("trackBookedPacket", TRACKED)
        report = track_by_consignment_number(fake_http, settings, " LE123 ")

        assert report.cn == "LE123"
        assert len(fake_http.calls) == 1

    def test_falls_through_to_later_variant(self, settings, fake_http):
        failure = {"status": 0, "error": "Invalid API key"}
        fake_http.script("trackBookedPacket", failure, failure, TRACKED)

        track_by_consignment_number(fake_http, settings, "LE123")

        assert len(fake_http.calls) == 3
        assert fake_http.calls[-1]["method"] == "POST"
        assert "api_key_secure" in fake_http.posted()

    def test_exhaustion_reports_every_attempt(self, settings, fake_http):
        fake_http.script("trackBookedPacket", {"status": 0, "error": "Invalid API key"})
        fake_http.script("trackPacket", {"status": 0, "error": "Packet not found"})

        with pytest.raises(TrackingExhaustedError) as exc:
            track_by_consignment_number(fake_http, settings, "LE123")

        assert len(fake_http.calls) == 12
        assert len(exc.value.attempts) == 12
        assert exc.value.message == "Packet not found"
        assert exc.value.response == {"status": 0, "error": "Packet not found"}
        assert all(attempt["ok"] is False for attempt in exc.value.attempts)
        assert API_PASSWORD not in json.dumps(exc.value.attempts)

    def test_blank_number_is_rejected(self, settings, fake_http):
        with pytest.raises(CourierConfigurationError, match="Consignment number is required"):
            track_by_consignment_number(fake_http, settings, "  ")
        assert fake_http.calls == []

    def test_requires_credentials(self, make_settings, fake_http):
        with pytest.raises(CourierConfigurationError, match="credentials not configured"):
            track_by_consignment_number(fake_http, make_settings(api_password=""), "LE123")
        assert fake_http.calls == []
