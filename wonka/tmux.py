"""tmux session management with per-run socket isolation, plus shell command helpers."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "InvalidEnvKeyError",
    "TmuxClient",
    "TmuxError",
    "available",
    "build_shell_command",
    "read_exit_code",
    "session_name",
]


class TmuxError(RuntimeError):
    """A tmux command failed."""


class InvalidEnvKeyError(ValueError):
    """An environment variable name is not a valid POSIX identifier."""


_VALID_ENV_KEY = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INTEGER = re.compile(r"[+-]?[0-9]+")

_NOT_FOUND_MARKERS = (
    "session not found",
    "can't find session",
    "no server running",
    "no current",
    "error connecting",
)


def _is_session_not_found(message: str) -> bool:
    return any(marker in message for marker in _NOT_FOUND_MARKERS)


def _shell_quote(value: str) -> str:
    return "'" + value.replace("'", "'\\''") + "'"


def available() -> bool:
    """Whether the tmux binary is on PATH."""
    return shutil.which("tmux") is not None


def session_name(run_id: str, worker_name: str) -> str:
    """Canonical session name for a worker in a run."""
    return f"{run_id}-{worker_name}"


@dataclass(frozen=True)
class _Result:
    ok: bool
    output: str
    reason: str

    def describe(self, what: str) -> str:
        return f"{what}: {self.reason}: {self.output.strip()}"


class TmuxClient:
    """tmux CLI wrapper bound to a socket named ``wonka-<run_id>``."""

    def __init__(self, run_id: str) -> None:
        self.socket = "wonka-" + run_id
        self._run_id = run_id

    @property
    def run_id(self) -> str:
        """The run identifier this client was created with."""
        return self._run_id

    def _run(self, *args: str) -> _Result:
        try:
            proc = subprocess.run(
                ["tmux", "-L", self.socket, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            return _Result(False, "", str(exc))
        output = proc.stdout or ""
        if proc.returncode == 0:
            return _Result(True, output, "")
        return _Result(False, output, f"exit status {proc.returncode}")

    def start_server(self) -> None:
        """Start the server with a bootstrap session and exit-empty off.

        Does nothing if the bootstrap session already exists.
        """
        bootstrap = self._run_id + "-bootstrap"
        try:
            if self.has_session(bootstrap):
                return
        except TmuxError:
            pass

        result = self._run(
            "new-session", "-d", "-s", bootstrap, "sleep", "infinity",
            ";",
            "set-option", "-g", "exit-empty", "off",
        )
        if not result.ok:
            try:
                self.kill_server()
            except TmuxError:
                pass
            raise TmuxError(result.describe("tmux start-server"))

    def create_session(self, name: str, shell_cmd: str, work_dir: str = "") -> None:
        """Start a detached session running ``bash -c shell_cmd``, optionally in work_dir."""
        if not shell_cmd:
            raise ValueError("tmux: empty command")
        args = ["new-session", "-d", "-s", name]
        if work_dir:
            args += ["-c", work_dir]
        args += ["bash", "-c", shell_cmd]
        result = self._run(*args)
        if not result.ok:
            raise TmuxError(result.describe(f'tmux new-session "{name}"'))

    def has_session(self, name: str) -> bool:
        """Whether the named session is alive; False when it or the server is absent."""
        result = self._run("has-session", "-t", name)
        if result.ok:
            return True
        if _is_session_not_found(result.output):
            return False
        raise TmuxError(result.describe(f'tmux has-session "{name}"'))

    def kill_session(self, name: str) -> None:
        """Terminate the named session."""
        result = self._run("kill-session", "-t", name)
        if not result.ok:
            raise TmuxError(result.describe(f'tmux kill-session "{name}"'))

    def list_sessions(self) -> list[str]:
        """Names of all sessions on this socket; empty when no server runs."""
        result = self._run("list-sessions", "-F", "#{session_name}")
        if not result.ok:
            if _is_session_not_found(result.output):
                return []
            raise TmuxError(result.describe("tmux list-sessions"))
        text = result.output.strip()
        return text.split("\n") if text else []

    def kill_server(self) -> None:
        """Terminate every session on this socket; a missing server is not an error."""
        result = self._run("kill-server")
        if not result.ok and not _is_session_not_found(result.output):
            raise TmuxError(result.describe("tmux kill-server"))

    def kill_session_if_exists(self, name: str) -> None:
        """Kill a session, ignoring only 'not found' and 'no server' failures."""
        try:
            self.kill_session(name)
        except TmuxError as exc:
            if not _is_session_not_found(str(exc)):
                raise


def build_shell_command(
    cmd: list[str],
    env: dict[str, str] | None = None,
    log_path: str = "",
    text_filter: str = "",
) -> str:
    """Build a bash command that exports env, runs cmd and records its exit code.

    With a log path, output goes to it and the exit code to ``<log_path>.exitcode``.
    With a text filter too, stdout is teed to the log and piped through jq into a
    ``.txt`` file, while stderr goes to a ``.stderr`` sidecar.
    Raises InvalidEnvKeyError for a key that is not a POSIX identifier.
    """
    env = env or {}
    for key in env:
        if not _VALID_ENV_KEY.fullmatch(key):
            raise InvalidEnvKeyError(f"invalid env key: {key!r}")

    parts = [f"export {key}={_shell_quote(env[key])}; " for key in sorted(env)]
    parts.append(" ".join(_shell_quote(part) for part in cmd))

    if log_path:
        exit_path = _shell_quote(log_path + ".exitcode")
        if text_filter:
            stem = log_path.removesuffix(".stdout")
            parts.append(
                f" 2> {_shell_quote(stem + '.stderr')}"
                f" | tee {_shell_quote(log_path)}"
                f" | jq -r --unbuffered {_shell_quote(text_filter)}"
                f" > {_shell_quote(stem + '.txt')}"
                f" 2>/dev/null; echo ${{PIPESTATUS[0]}} > {exit_path}"
            )
        else:
            parts.append(f" > {_shell_quote(log_path)} 2>&1; echo $? > {exit_path}")

    return "".join(parts)


def read_exit_code(log_path: str) -> int:
    """Read the exit code written next to log_path.

    Returns -1 (unknown) when the sidecar is missing or blank; raises ValueError
    when its content is not an integer.
    """
    try:
        data = Path(log_path + ".exitcode").read_bytes()
    except FileNotFoundError:
        return -1
    text = data.decode("utf-8", errors="replace").strip()
    if not text:
        return -1
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"parse exit code {text!r}: not an integer")
    return int(text)