from __future__ import annotations

import io
import sys
import threading

from weather_gateway.stdio_trace import decode_line, main, pump, run


def test_decode_line() -> None:
    assert decode_line(b'{"jsonrpc": "2.0"}\n') == '{"jsonrpc": "2.0"}\n'
    assert decode_line(b"\xff\xfe\n").startswith("Non-UTF-8 data:")


def test_pump_forwards_and_logs() -> None:
    source = io.BytesIO(b"first\nsecond\n")
    target = io.BytesIO()
    log = io.StringIO()

    pump(source, target, log, "Output", threading.Lock())

    assert target.getvalue() == b"first\nsecond\n"
    assert log.getvalue() == "Output: first\nOutput: second\n"


def test_run_logs_child_traffic(tmp_path) -> None:
    log_path = tmp_path / "mcp_io.log"
    stdin = io.BytesIO(b"ping\n")
    stdout = io.BytesIO()
    stderr = io.BytesIO()
    child = "import sys; line = sys.stdin.readline(); sys.stdout.write(line.upper()); sys.stdout.flush()"

    code = run([sys.executable, "-c", child], str(log_path), stdin=stdin, stdout=stdout, stderr=stderr)

    assert code == 0
    assert stdout.getvalue() == b"PING\n"
    logged = log_path.read_text(encoding="utf-8")
    assert "Input: ping\n" in logged
    assert "Output: PING\n" in logged


def test_run_returns_child_exit_code(tmp_path) -> None:
    code = run(
        [sys.executable, "-c", "raise SystemExit(3)"],
        str(tmp_path / "log"),
        stdin=io.BytesIO(b""),
        stdout=io.BytesIO(),
        stderr=io.BytesIO(),
    )

    assert code == 3


def test_main_without_command_prints_usage(capsys) -> None:
    assert main(["--"]) == 2
    assert "usage" in capsys.readouterr().err
