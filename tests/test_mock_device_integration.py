"""Integration tests: real DeviceClient and bridge against the local mock strip."""

import threading
import time

import pytest
import requests

from wnpbridge.bridge import ColorStateBridge
from wnpbridge.device import DeviceClient
from wnpbridge.exceptions import TransportError
from wnpbridge.mock_device import MockDevice
from wnpbridge.models import Color
from wnpbridge.responders import BRIGHTNESS, HUE, ON, SATURATION, LightResponder
from wnpbridge.telemetry import MetricsRecorder

from conftest import FakeCharacteristics, SleepRecorder


@pytest.fixture
def device():
    with MockDevice(pixel_count=8, port=0) as device:
        yield device


@pytest.fixture
def client(device):
    with DeviceClient(device.url, timeout=5) as client:
        yield client


@pytest.mark.integration
class TestMockDeviceEndpoints:
    """Test the HTTP surface through DeviceClient."""

    def test_starts_dark(self, client):
        assert client.fetch_states() == [0] * 8
        assert client.fetch_pixel_count() == 8

    def test_push_then_fetch(self, client, device):
        words = [0xFFFF0000, 0xFF00FF00] * 4
        client.push_states(words)

        assert client.fetch_states() == words
        assert device.states == words

    def test_clear(self, client, device):
        device.states = [0xFFFFFFFF] * 8
        client.clear()
        assert device.states == [0] * 8

    def test_bad_payload_is_rejected(self, device):
        response = requests.post(device.url + "/raw", data=b'{"not": "a list"}', timeout=5)
        assert response.status_code == 400

    def test_unknown_path(self, device):
        with DeviceClient(device.url + "/nothing", timeout=5) as client:
            with pytest.raises(TransportError) as exc_info:
                client.fetch_states()
        assert exc_info.value.status_code == 404

    def test_unreachable_device(self, device):
        url = device.url
        device.stop()

        with DeviceClient(url, timeout=1) as client:
            with pytest.raises(TransportError, match="Could not connect"):
                client.fetch_states()


@pytest.mark.integration
class TestBridgeAgainstMockDevice:
    """End-to-end flows through the bridge and responder."""

    def test_on_off_cycle(self, client, device):
        bridge = ColorStateBridge(client)
        bridge.initialize()
        assert bridge.is_off()

        bridge.turn_on()
        assert device.states == [0xFFFF0000] * 8
        assert bridge.is_on()

        bridge.turn_off()
        assert device.states == [0] * 8

        bridge.turn_on()
        assert device.states == [0xFFFF0000] * 8

    def test_responder_flow_records_metrics(self, client, device):
        recorder = MetricsRecorder()
        client.register_observer(recorder)
        bridge = ColorStateBridge(client)
        bridge.initialize()

        chars = FakeCharacteristics()
        responder = LightResponder(bridge, chars, recorder, sleep=SleepRecorder())
        responder.sync_from_device()
        assert chars.values[ON] is False

        chars.values.update({HUE: 240.0, SATURATION: 100.0, BRIGHTNESS: 100})
        responder.on_hue_changed(240.0)
        assert device.states == [0xFF0000FF] * 8

        # blue was applied while dark, so the remembered on-color is still red
        responder.on_power_changed(False)
        responder.on_power_changed(True)
        assert bridge.state == (Color.red(),) * 8
        assert chars.values[ON] is True

        snapshot = recorder.snapshot()
        assert snapshot["client.fetch_states"]["count"] >= 3
        assert snapshot["client.push_states"]["count"] == 2
        assert snapshot["hue.remote_update"]["errors"] == 0


@pytest.mark.integration
class TestStalledDevice:
    """A strip that stops answering, with the default (unbounded) request timeout."""

    def test_handler_stalls_until_device_answers(self, device):
        with DeviceClient(device.url) as client:
            bridge = ColorStateBridge(client)
            bridge.initialize()
            chars = FakeCharacteristics()
            responder = LightResponder(bridge, chars, MetricsRecorder(), sleep=SleepRecorder())

            device.pause()
            handler = threading.Thread(target=responder.on_power_changed, args=(True,))
            handler.start()
            try:
                handler.join(0.5)
                # nothing bounds the call, so the handler is still waiting
                assert handler.is_alive()

                start = time.monotonic()
                assert responder.on_power_requested() is False
                assert time.monotonic() - start < 0.5
            finally:
                device.resume()
                handler.join(5)

            assert not handler.is_alive()
            assert responder.on_power_requested() is True
            assert chars.values[ON] is True

    def test_configured_timeout_bounds_the_stall(self, device):
        with DeviceClient(device.url, timeout=0.2) as client:
            bridge = ColorStateBridge(client)
            bridge.initialize()

            device.pause()
            with pytest.raises(TransportError, match="did not respond in time"):
                bridge.turn_off()
            device.resume()

        assert bridge.is_off()

    def test_bool_words_are_rejected(self, device):
        response = requests.post(device.url + "/raw", json=[True, False], timeout=5)
        assert response.status_code == 400
        assert device.states == [0] * 8
