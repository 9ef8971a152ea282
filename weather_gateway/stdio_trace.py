"""Run an MCP stdio server as a child process and log its traffic to a file.

Usage::

    weather-gateway-trace --log mcp_io.log -- python -m weather_gateway --mode mcp

stdin and stdout are forwarded byte for byte; every line is also written to
the log with an ``Input:``, ``Output:`` or ``Error:`` prefix.
"""
import argparse
import os
import subprocess
import sys
import threading
from typing import BinaryIO, TextIO


LOG_FILE = os.path.join(os.getcwd(), "mcp_io.log")


def decode_line(line_bytes: bytes) -> str:
    try:
        return line_bytes.decode("utf-8")
    except UnicodeDecodeError:
        return f"Non-UTF-8 data: {line_bytes!r}\n"


def pump(source: BinaryIO, target: BinaryIO, log_file: TextIO, prefix: str,
         lock: threading.Lock, close_target: bool = False) -> None:
    """Copy ``source`` to ``target`` line by line, logging each line."""
    try:
        for line_bytes in iter(source.readline, b""):
            with lock:
                log_file.write(f"{prefix}: {decode_line(line_bytes)}")
                log_file.flush()
            target.write(line_bytes)
            target.flush()
    except (OSError, ValueError) as e:
        with lock:
            log_file.write(f"Error in forwarding {prefix}: {e}\n")
            log_file.flush()
    finally:
        if close_target:
            try:
                target.close()
            except OSError as e:
                with lock:
                    log_file.write(f"Error closing target stdin: {e}\n")
            with lock:
                log_file.write("------- Target STDIN closed.\n")
                log_file.flush()


def run(command: list[str], log_path: str,
        stdin: BinaryIO | None = None, stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None) -> int:
    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout.buffer
    stderr = stderr or sys.stderr.buffer
    lock = threading.Lock()

    with open(log_path, "w", encoding="utf-8") as log_file:
        process = subprocess.Popen(
            command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
        )
        threads = [
            threading.Thread(target=pump, args=(stdin, process.stdin, log_file, "Input", lock, True), daemon=True),
            threading.Thread(target=pump, args=(process.stdout, stdout, log_file, "Output", lock), daemon=True),
            threading.Thread(target=pump, args=(process.stderr, stderr, log_file, "Error", lock), daemon=True),
        ]
        for thread in threads:
            thread.start()

        try:
            process.wait()
        except KeyboardInterrupt:
            process.terminate()
            try:
                process.wait(timeout=1.0)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()

        for thread in threads:
            thread.join(timeout=1.0)
        with lock:
            log_file.flush()

    return process.returncode


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weather-gateway-trace",
        description="Wrap a command, passing STDIN and STDOUT verbatim, and log to a file.",
        usage="%(prog)s [--log FILE] -- <command> [args...]",
    )
    parser.add_argument("--log", default=LOG_FILE, help="log file path (default: ./mcp_io.log)")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to run with arguments")
    args = parser.parse_args(argv)

    command = args.command
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        parser.print_help(sys.stderr)
        return 2

    try:
        return run(command, args.log)
    except OSError as e:
        print(f"MCP Logger Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
