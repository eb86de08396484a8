"""Tests for MetricsRecorder."""

import pytest

from wnpbridge.device import DeviceRequest, DeviceRequestObserver
from wnpbridge.exceptions import TransportError
from wnpbridge.telemetry import (
    DEFAULT_BUCKETS,
    DurationStats,
    MetricsRecorder,
    ObservabilitySink,
    render_text,
)


class TestDurationStats:
    """Test the per-key histogram."""

    @pytest.mark.unit
    def test_bucket_placement(self):
        stats = DurationStats(DEFAULT_BUCKETS)
        for seconds in (0.001, 0.01, 0.3, 20.0):
            stats.observe(seconds)

        histogram = stats.to_dict()["buckets"]
        assert histogram["0.01"] == 2  # upper bounds are inclusive
        assert histogram["0.5"] == 3
        assert histogram["10.0"] == 3
        assert histogram["+Inf"] == 4

    @pytest.mark.unit
    def test_totals(self):
        stats = DurationStats(DEFAULT_BUCKETS)
        stats.observe(0.2)
        stats.observe(0.4)

        assert stats.count == 2
        assert stats.total == pytest.approx(0.6)
        assert stats.mean == pytest.approx(0.3)

    @pytest.mark.unit
    def test_empty_mean(self):
        assert DurationStats(DEFAULT_BUCKETS).mean == 0.0


class TestMetricsRecorder:
    """Test recording by (subsystem, event)."""

    @pytest.mark.unit
    def test_satisfies_both_protocols(self):
        recorder = MetricsRecorder()
        assert isinstance(recorder, ObservabilitySink)
        assert isinstance(recorder, DeviceRequestObserver)

    @pytest.mark.unit
    def test_observe_duration(self):
        recorder = MetricsRecorder()
        recorder.observe_duration("hue", "remote_update", 0.02)
        recorder.observe_duration("hue", "remote_update", 0.04)

        stats = recorder.get("hue", "remote_update")
        assert stats.count == 2
        assert recorder.get("sat", "remote_update") is None

    @pytest.mark.unit
    def test_record_error_prefers_technical_message(self):
        recorder = MetricsRecorder()
        error = TransportError("Could not connect to the LED strip", operation="clear")

        recorder.record_error("on", "remote_update", error)

        stats = recorder.get("on", "remote_update")
        assert stats.errors == 1
        assert stats.last_error == "clear: Could not connect to the LED strip"
        assert stats.count == 0

    @pytest.mark.unit
    def test_device_requests_land_under_client(self):
        recorder = MetricsRecorder()
        failure = TransportError("LED strip did not respond in time", operation="push_states")

        recorder.on_device_request(DeviceRequest("fetch_states", "GET", "/states", 200, 0.03))
        recorder.on_device_request(DeviceRequest("push_states", "POST", "/raw", None, 1.2, failure))

        assert recorder.get("client", "fetch_states").errors == 0
        push = recorder.get("client", "push_states")
        assert push.count == 1
        assert push.errors == 1

    @pytest.mark.unit
    def test_snapshot_keys(self):
        recorder = MetricsRecorder(buckets=(1.0, 0.1))
        recorder.observe_duration("acc", "identify", 4.2)
        recorder.observe_duration("on", "remote_get", 0.001)

        snapshot = recorder.snapshot()
        assert list(snapshot) == ["acc.identify", "on.remote_get"]
        assert list(snapshot["acc.identify"]["buckets"]) == ["0.1", "1.0", "+Inf"]
        assert snapshot["acc.identify"]["buckets"]["+Inf"] == 1
        assert snapshot["on.remote_get"]["buckets"]["0.1"] == 1


class TestRenderText:
    """Test the Prometheus text rendering of a recorder."""

    @pytest.mark.unit
    def test_empty_recorder(self):
        assert render_text(MetricsRecorder()) == "\n"

    @pytest.mark.unit
    def test_characteristic_events(self):
        recorder = MetricsRecorder(buckets=(1.0, 0.1))
        recorder.observe_duration("hue", "remote_update", 0.05)

        lines = render_text(recorder).splitlines()
        assert lines == [
            "# HELP wnp_bridge_hue_update_duration_seconds Duration of 'hue' characteristic events.",
            "# TYPE wnp_bridge_hue_update_duration_seconds histogram",
            'wnp_bridge_hue_update_duration_seconds_bucket{event="remote_update",le="0.1"} 1',
            'wnp_bridge_hue_update_duration_seconds_bucket{event="remote_update",le="1.0"} 1',
            'wnp_bridge_hue_update_duration_seconds_bucket{event="remote_update",le="+Inf"} 1',
            'wnp_bridge_hue_update_duration_seconds_sum{event="remote_update"} 0.05',
            'wnp_bridge_hue_update_duration_seconds_count{event="remote_update"} 1',
            "# HELP wnp_bridge_hue_update_errors_total Failed 'hue' characteristic events.",
            "# TYPE wnp_bridge_hue_update_errors_total counter",
            'wnp_bridge_hue_update_errors_total{event="remote_update"} 0',
        ]

    @pytest.mark.unit
    def test_client_requests_use_operation_label(self):
        recorder = MetricsRecorder()
        failure = TransportError("LED strip did not respond in time", operation="push_states")
        recorder.on_device_request(DeviceRequest("fetch_states", "GET", "/states", 200, 0.03))
        recorder.on_device_request(DeviceRequest("push_states", "POST", "/raw", None, 1.2, failure))

        text = render_text(recorder)
        assert "# TYPE wnp_bridge_client_request_duration_seconds histogram" in text
        assert 'wnp_bridge_client_request_duration_seconds_count{operation="fetch_states"} 1' in text
        assert 'wnp_bridge_client_request_errors_total{operation="push_states"} 1' in text
        assert 'wnp_bridge_client_request_errors_total{operation="fetch_states"} 0' in text

    @pytest.mark.unit
    def test_families_are_grouped_by_subsystem(self):
        recorder = MetricsRecorder()
        recorder.observe_duration("on", "remote_update", 0.01)
        recorder.observe_duration("client", "clear", 0.01)
        recorder.observe_duration("on", "remote_get", 0.01)

        text = render_text(recorder)
        assert text.count("# TYPE wnp_bridge_on_update_duration_seconds histogram") == 1
        assert text.index("wnp_bridge_client_request") < text.index("wnp_bridge_on_update")
