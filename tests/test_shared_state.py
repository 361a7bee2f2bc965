import threading
import time

from models import ControlState, MeasurementConfig, ViewportSize
from monitoring import Iperf3Process
from shared_state import SharedState


def test_defaults():
    state = SharedState()
    assert state.get_viewport() == ViewportSize(80, 24)
    assert state.get_config() == MeasurementConfig()
    assert state.get_control_state() is ControlState.NORMAL
    assert state.get_process() is None
    assert state.get_process_id() is None


def test_viewport_update():
    state = SharedState()
    state.set_viewport(120, 40)
    assert state.get_viewport() == ViewportSize(120, 40)


def test_reload_stores_config_with_state():
    state = SharedState(MeasurementConfig(target="a"))
    assert state.request_reload(MeasurementConfig(target="b")) is True
    assert state.get_control_state() is ControlState.RELOAD_REQUESTED
    assert state.get_config().target == "b"

    assert state.consume_reload() is True
    assert state.get_control_state() is ControlState.NORMAL
    assert state.consume_reload() is False


def test_reload_without_config_keeps_current():
    state = SharedState(MeasurementConfig(target="a"))
    state.request_reload()
    assert state.get_config().target == "a"


def test_quit_is_absorbing():
    state = SharedState()
    state.request_quit()
    assert state.request_reload(MeasurementConfig(target="b")) is False
    assert state.consume_reload() is False
    assert state.get_control_state() is ControlState.QUIT
    assert state.get_config().target is None


def test_wait_for_change_times_out_in_normal():
    state = SharedState()
    start = time.monotonic()
    assert state.wait_for_change(0.05) is ControlState.NORMAL
    assert time.monotonic() - start >= 0.04


def test_wait_for_change_wakes_on_request():
    state = SharedState()
    result = {}

    def waiter():
        result["state"] = state.wait_for_change(5.0)

    thread = threading.Thread(target=waiter)
    thread.start()
    time.sleep(0.05)
    state.request_reload(MeasurementConfig(target="x"))
    thread.join(timeout=2.0)
    assert not thread.is_alive()
    assert result["state"] is ControlState.RELOAD_REQUESTED


def test_kill_process_terminates_and_clears(streaming_iperf3):
    state = SharedState()
    process = Iperf3Process(MeasurementConfig(target="h"), binary=streaming_iperf3()).start()
    state.set_process(process)
    assert state.get_process_id() == process.pid

    state.kill_process()
    assert state.get_process() is None
    assert not process.is_running()
    process.close()

    # sin proceso registrado no hace nada
    state.kill_process()
