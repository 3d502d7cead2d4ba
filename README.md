# wonka

Core pieces of an orchestrator that drives autonomous coding agents in
isolated tmux sessions: the task and worker types, tmux session control with
exit-code capture, and a circuit breaker for rapidly failing workers.

## Modules

### `wonka.types`

- Enums (string-valued, `str()` gives the plain value): `TaskStatus`
  (`open`, `assigned`, `in_progress`, `completed`, `failed`, `blocked`),
  `Criticality` (`critical`, `non_critical`), `WorkerStatus` (`idle`,
  `active`), `Model` (`opus`, `sonnet`, `haiku`), `LedgerKind` (`fs`,
  `beads`) and `AgentOutcome` (`success`, `failure`, `blocked`, `handoff`).
- `TaskStatus.is_terminal()` and `is_terminal(status)` report whether a
  status is `completed`, `failed` or `blocked`. `is_terminal` also accepts
  raw strings; unknown and empty strings are not terminal.
- Dataclasses: `LockConfig`, `Task`, `Worker`, `Preset`, `RoleConfig`,
  `LifecycleConfig`.
- A task's role, branch and criticality live in its `labels` under the keys
  `LABEL_ROLE`, `LABEL_BRANCH` and `LABEL_CRITICALITY`. They are read through
  the properties `Task.role`, `Task.branch` (empty string when unset) and
  `Task.is_critical` (true only when the label is `"critical"`).

### `wonka.tmux`

- `TmuxClient(run_id)` runs tmux on a private socket named
  `wonka-<run_id>`. Methods: `start_server()`, `create_session(name,
  shell_cmd, work_dir="")`, `has_session(name)`, `kill_session(name)`,
  `list_sessions()`, `kill_server()` and `kill_session_if_exists(name)`;
  the `run_id` property returns the run identifier. Failing tmux commands
  raise `TmuxError`; a missing session or server makes `has_session` return
  `False`, `list_sessions` return `[]`, and `kill_server` succeed.
  `create_session` raises `ValueError` for an empty command.
- `build_shell_command(cmd, env=None, log_path="", text_filter="")` builds
  the string passed to `bash -c`: sorted, quoted `export` statements, the
  quoted command, and — when `log_path` is given — redirection of output to
  the log and of the exit code to `<log_path>.exitcode`. With a
  `text_filter`, stdout is teed to the log and piped through
  `jq -r --unbuffered <filter>` into a `.txt` file, stderr goes to a
  `.stderr` file, and the agent's exit code is taken from `PIPESTATUS[0]`.
  Keys that are not POSIX identifiers raise `InvalidEnvKeyError`.
- `read_exit_code(log_path)` reads the sidecar back: `-1` when it is missing
  or blank, `ValueError` when its content is not an integer.
- `session_name(run_id, worker_name)` returns `"<run_id>-<worker_name>"`.
- `available()` reports whether `tmux` is on `PATH`.

### `wonka.watchdog`

- `CircuitBreaker(threshold, window)` counts rapid failures (sessions that
  lived less than `window`) per worker. `record_failure(worker_name,
  session_start)` returns whether the breaker is tripped; it trips once a
  single worker has `threshold` failures within the window — failures of
  different workers are never added together. `tripped()` reads the state
  and `reset()` clears it. It is safe to use from several threads.
- `WatchdogConfig` holds `interval`, `cb_threshold` and `cb_window`;
  `default_watchdog_config()` returns 30 s, 3 and 60 s.

## What the package does not do

There is no supervision loop, dispatcher, task store, event log or command
line. `wonka.watchdog` supplies the circuit breaker and its configuration,
but nothing here polls worker sessions or restarts them; a caller has to
combine `TmuxClient.has_session` and `CircuitBreaker` itself.

## Install

```
pip install .
```

The tmux functions need the `tmux` binary on `PATH`.

## Example

```python
from wonka.tmux import TmuxClient, build_shell_command, read_exit_code, session_name

client = TmuxClient("run-1")
client.start_server()

cmd = build_shell_command(
    ["agent", "--task", "t1"],
    {"ORCH_TASK_ID": "t1"},
    "/tmp/t1.stdout",
)
client.create_session(session_name("run-1", "w-01"), cmd, "/path/to/repo")
# ... later
print(read_exit_code("/tmp/t1.stdout"))
client.kill_server()
```

```python
from datetime import datetime, timedelta
from wonka.watchdog import CircuitBreaker

breaker = CircuitBreaker(3, timedelta(seconds=60))
started = datetime.now() - timedelta(seconds=1)
for _ in range(3):
    breaker.record_failure("w-01", started)
assert breaker.tripped()
```

```python
from wonka.types import Task, TaskStatus, LABEL_ROLE

task = Task(id="t1", status=TaskStatus.FAILED, labels={LABEL_ROLE: "builder"})
assert task.role == "builder"
assert task.status.is_terminal()
```

## Tests

```
pip install .[test]
pytest
```