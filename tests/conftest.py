"""Fixtures compartidas: un iperf3 falso escrito en Python."""

import stat
import sys
import textwrap
from typing import Callable

import pytest

from tests.helpers import RecordingBridge


STREAMING_SCRIPT = """
import sys, time
print("Connecting to host 127.0.0.1, port 5201", flush=True)
print("[ ID] Interval           Transfer     Bitrate", flush=True)
for i in range({count}):
    print("[  5]   %d.00-%d.00   sec   238 MBytes  2000 Mbits/sec" % (i, i + 1), flush=True)
    time.sleep({delay})
{tail}
"""

BLANK_STDERR_SCRIPT = """
import sys
sys.stderr.write("\\n")
sys.stderr.flush()
print("[  5]   0.00-1.00   sec   238 MBytes  2000 Mbits/sec", flush=True)
"""

FAILING_SCRIPT = """
import sys
sys.stderr.write("iperf3: error - unable to connect to server: Connection refused\\n")
sys.stderr.flush()
sys.exit(1)
"""


@pytest.fixture
def make_fake_iperf3(tmp_path) -> Callable[[str], str]:
    """Crea un ejecutable que ignora sus argumentos y ejecuta `body`."""
    def _make(body: str, name: str = "iperf3") -> str:
        path = tmp_path / name
        path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)
    return _make


@pytest.fixture
def streaming_iperf3(make_fake_iperf3) -> Callable[..., str]:
    def _make(count: int = 1000, delay: float = 0.05, forever: bool = True) -> str:
        tail = "time.sleep(60)" if forever else ""
        return make_fake_iperf3(STREAMING_SCRIPT.format(count=count, delay=delay, tail=tail))
    return _make


@pytest.fixture
def failing_iperf3(make_fake_iperf3) -> str:
    return make_fake_iperf3(FAILING_SCRIPT)


@pytest.fixture
def blank_stderr_iperf3(make_fake_iperf3) -> str:
    return make_fake_iperf3(BLANK_STDERR_SCRIPT)


@pytest.fixture
def bridge() -> RecordingBridge:
    return RecordingBridge()
