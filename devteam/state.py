"""Session state: roles, per-role run records, files, transcript, iteration snapshots."""

import operator
import time
from dataclasses import dataclass, field
from enum import Enum
from collections.abc import Mapping
from typing import Annotated, Literal, TypedDict


class Role(str, Enum):
    PLANNER = "planner"
    ARCHITECT = "architect"
    DESIGNER = "designer"
    FRONTEND = "frontend"
    BACKEND = "backend"
    QA = "qa"
    DOCS = "docs"
    REVIEWER = "reviewer"


# Mid-pipeline roles in declaration order. Merge folds their files in this order.
PARALLEL_ROLES = (
    Role.ARCHITECT,
    Role.DESIGNER,
    Role.FRONTEND,
    Role.BACKEND,
    Role.QA,
    Role.DOCS,
)


class AgentStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


_ALLOWED_TRANSITIONS = {
    AgentStatus.IDLE: {AgentStatus.RUNNING},
    AgentStatus.RUNNING: {AgentStatus.DONE, AgentStatus.ERROR},
    # A finished role only moves again when re-dispatched in a later iteration.
    AgentStatus.DONE: {AgentStatus.RUNNING},
    AgentStatus.ERROR: {AgentStatus.RUNNING},
}


@dataclass
class AgentRunState:
    role: Role
    status: AgentStatus = AgentStatus.IDLE
    output: str = ""
    error: str | None = None

    def transition(self, status: AgentStatus) -> None:
        """Move to *status*, refusing anything that would regress within a run."""
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise ValueError(
                f"Invalid status transition for {self.role.value}: "
                f"{self.status.value} -> {status.value}"
            )
        self.status = status


def initial_agent_states() -> dict[Role, AgentRunState]:
    """One idle, empty record per declared role."""
    return {role: AgentRunState(role=role) for role in Role}


@dataclass(frozen=True)
class ProjectFile:
    path: str  # Normalized relative path. Identity key in the file set.
    content: str
    language: str = "text"


@dataclass(frozen=True)
class ChatMessage:
    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class IterationContext:
    """Snapshot taken just before a pipeline stage dispatches its agents.

    `messages` and `files` are fixed at build time. `agents` is the live
    role-state map owned by the orchestrator, so roles running later see
    output that finished after the snapshot was taken.
    """

    messages: tuple[ChatMessage, ...]
    project_type: str
    files: Mapping[str, ProjectFile]
    agents: Mapping[Role, AgentRunState]


class IterationPhase(str, Enum):
    IDLE = "idle"
    PLANNER_RUNNING = "planner_running"
    PARALLEL_RUNNING = "parallel_running"
    REVIEWER_RUNNING = "reviewer_running"
    FAILED = "failed"


@dataclass
class IterationResult:
    status: Literal["completed", "failed", "rejected"]
    files_changed: list[str] = field(default_factory=list)
    error: str | None = None


class IterationState(TypedDict):
    """LangGraph state for one iteration. Role records and files live on the orchestrator."""

    request: str
    dispatched_roles: list[str]
    stage_prompts: dict[str, str]
    # Filled concurrently by the specialist branches; reducer concatenates.
    completed_roles: Annotated[list[str], operator.add]
    files_changed: list[str]
