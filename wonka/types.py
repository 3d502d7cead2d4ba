"""Core data types shared by the orchestrator: statuses, tasks, workers and configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

__all__ = [
    "LABEL_BRANCH",
    "LABEL_CRITICALITY",
    "LABEL_ROLE",
    "AgentOutcome",
    "Criticality",
    "LedgerKind",
    "LifecycleConfig",
    "LockConfig",
    "Model",
    "Preset",
    "RoleConfig",
    "Task",
    "TaskStatus",
    "Worker",
    "WorkerStatus",
    "is_terminal",
]


class _StrEnum(str, Enum):
    """String-valued enum whose str() is its plain value."""

    def __str__(self) -> str:
        return self.value


class TaskStatus(_StrEnum):
    """Lifecycle state of a task."""

    OPEN = "open"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    BLOCKED = "blocked"

    def is_terminal(self) -> bool:
        """Whether this status is terminal (completed, failed or blocked)."""
        return is_terminal(self)


_TERMINAL_STATUSES = frozenset(
    {TaskStatus.COMPLETED.value, TaskStatus.FAILED.value, TaskStatus.BLOCKED.value}
)


def is_terminal(status: TaskStatus | str) -> bool:
    """Whether a status, given as enum member or raw string, is terminal.

    Unknown and empty statuses are never terminal.
    """
    return str(status) in _TERMINAL_STATUSES


class Criticality(_StrEnum):
    """Whether a task's failure ends the lifecycle."""

    CRITICAL = "critical"
    NON_CRITICAL = "non_critical"


class WorkerStatus(_StrEnum):
    """Lifecycle state of a worker."""

    IDLE = "idle"
    ACTIVE = "active"


class Model(_StrEnum):
    """AI model used for an agent."""

    OPUS = "opus"
    SONNET = "sonnet"
    HAIKU = "haiku"


class LedgerKind(_StrEnum):
    """Backing store implementation."""

    FS = "fs"
    BEADS = "beads"


class AgentOutcome(_StrEnum):
    """Result of an agent invocation, derived solely from its exit code (0-3)."""

    SUCCESS = "success"
    FAILURE = "failure"
    BLOCKED = "blocked"
    HANDOFF = "handoff"


LABEL_ROLE = "role"
LABEL_BRANCH = "branch"
LABEL_CRITICALITY = "criticality"


@dataclass
class LockConfig:
    """Configuration of the exclusive per-branch lifecycle lock."""

    path: str = ""
    staleness_threshold: timedelta = field(default_factory=timedelta)
    retry_count: int = 0
    retry_delay: timedelta = field(default_factory=timedelta)


@dataclass
class Task:
    """A unit of work; role, branch and criticality are carried in labels."""

    id: str = ""
    title: str = ""
    body: str = ""
    status: TaskStatus = TaskStatus.OPEN
    assignee: str = ""
    priority: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def role(self) -> str:
        """Role label, or an empty string if unset."""
        return (self.labels or {}).get(LABEL_ROLE, "")

    @property
    def branch(self) -> str:
        """Lifecycle branch label, or an empty string if unset."""
        return (self.labels or {}).get(LABEL_BRANCH, "")

    @property
    def is_critical(self) -> bool:
        """Whether the criticality label marks this task as critical."""
        return (self.labels or {}).get(LABEL_CRITICALITY) == Criticality.CRITICAL.value


@dataclass
class Worker:
    """A process slot that executes agent tasks."""

    name: str
    status: WorkerStatus = WorkerStatus.IDLE
    current_task_id: str = ""
    session_pid: int = 0
    session_started_at: datetime | None = None


@dataclass
class Preset:
    """How to launch, detect and talk to a specific agent type."""

    name: str = ""
    command: str = ""
    args: list[str] = field(default_factory=list)
    process_names: list[str] = field(default_factory=list)
    prompt_flag: str = ""
    agent_flag: str = ""
    plugin_flag: str = ""
    system_prompt_flag: str = ""
    model_flag: str = ""
    env: dict[str, str] = field(default_factory=dict)
    text_filter: str = ""


@dataclass
class RoleConfig:
    """Binds a role tag to an instruction file and a launch preset."""

    instruction_file: str = ""
    preset: Preset | None = None
    max_turns: int = 0


@dataclass
class LifecycleConfig:
    """Per-branch runtime configuration."""

    branch: str = ""
    gap_tolerance: int = 0
    max_retries: int = 0
    max_handoffs: int = 0
    base_timeout: timedelta = field(default_factory=timedelta)
    lock: LockConfig = field(default_factory=LockConfig)
    roles: dict[str, RoleConfig] = field(default_factory=dict)