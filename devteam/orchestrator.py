"""Orchestrator: owns the session state and drives one iteration at a time.

The role-state map, the virtual file set and the transcript are written
only here. Readers get snapshots (`snapshot()`) or read-only views.
"""

import sys
from collections.abc import Callable, Iterable
from types import MappingProxyType

from devteam.agents.invoker import AgentInvoker, InvocationResult
from devteam.config import get_config
from devteam.graph import build_iteration_graph
from devteam.state import (
    AgentRunState,
    AgentStatus,
    ChatMessage,
    IterationContext,
    IterationPhase,
    IterationResult,
    ProjectFile,
    Role,
    initial_agent_states,
)
from devteam.utils.exporter import build_archive
from devteam.utils.merger import merge_files
from devteam.utils.preview import render_preview
from devteam.utils.validator import validate_project_type, validate_request

COMPLETION_MESSAGE = "Team finished iteration. Check the team view or the project files."

UpdateListener = Callable[[Role, AgentRunState], None]


class Orchestrator:
    """Runs user requests through planner, six parallel specialists, and reviewer."""

    def __init__(
        self,
        invoker: AgentInvoker | None = None,
        project_type: str | None = None,
        on_update: UpdateListener | None = None,
    ):
        self._invoker = invoker or AgentInvoker()
        self._project_type = validate_project_type(
            project_type or get_config().get("default_project_type", "Web App (Single Page)")
        )
        self._on_update = on_update
        self._agents = initial_agent_states()
        self._files: dict[str, ProjectFile] = {}
        self._messages: list[ChatMessage] = []
        self._phase = IterationPhase.IDLE
        self.last_error: str | None = None
        self._graph = build_iteration_graph(self)

    # --- Read side ---

    @property
    def agents(self):
        return MappingProxyType(self._agents)

    @property
    def files(self):
        return MappingProxyType(self._files)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def phase(self) -> IterationPhase:
        return self._phase

    @property
    def is_running(self) -> bool:
        return self._phase != IterationPhase.IDLE

    @property
    def project_type(self) -> str:
        return self._project_type

    @project_type.setter
    def project_type(self, value: str) -> None:
        if self.is_running:
            raise RuntimeError("Cannot change the project type while an iteration is running.")
        self._project_type = validate_project_type(value)

    def snapshot(self) -> IterationContext:
        """Take a snapshot of the transcript and file set; role states stay live."""
        return IterationContext(
            messages=tuple(self._messages),
            project_type=self._project_type,
            files=MappingProxyType(self._files),
            agents=MappingProxyType(self._agents),
        )

    def readme(self) -> ProjectFile | None:
        return next((f for f in self._files.values() if "readme" in f.path.lower()), None)

    def preview(self) -> str | None:
        return render_preview(self._files)

    def export_zip(self) -> bytes:
        return build_archive(self._files)

    # --- Write side ---

    def set_phase(self, phase: IterationPhase) -> None:
        self._phase = phase

    def mark_running(self, role: Role) -> None:
        state = self._agents[role]
        state.transition(AgentStatus.RUNNING)
        state.output = ""
        state.error = None
        self._notify(role)

    def append_output(self, role: Role, chunk: str) -> None:
        state = self._agents[role]
        if state.status != AgentStatus.RUNNING:
            raise ValueError(f"Chunk received for {role.value} while {state.status.value}.")
        state.output += chunk
        self._notify(role)

    def complete(self, role: Role, result: InvocationResult) -> None:
        state = self._agents[role]
        state.transition(AgentStatus.DONE if result.ok else AgentStatus.ERROR)
        state.output = result.text
        state.error = result.error
        self._notify(role)

    def apply_files(self, new_files: Iterable[ProjectFile]) -> list[str]:
        """Merge *new_files* into the file set; return the touched paths in merge order."""
        new_files = list(new_files)
        self._files = merge_files(self._files, new_files)
        return list(dict.fromkeys(f.path for f in new_files))

    async def run_role(self, role: Role, prompt: str) -> InvocationResult:
        """Invoke *role* on *prompt*, stream into the role's slot, then record the outcome."""
        result = await self._invoker.invoke(role, prompt, on_chunk=lambda chunk: self.append_output(role, chunk))
        self.complete(role, result)
        return result

    def _notify(self, role: Role) -> None:
        if self._on_update is not None:
            self._on_update(role, self._agents[role])

    def _close_running_roles(self, message: str) -> None:
        """Mark every still-running role as errored, then tell the listener.

        Runs on the failure path, so a listener that raises again is logged
        rather than allowed to escape `submit()`.
        """
        closed = [role for role, state in self._agents.items() if state.status == AgentStatus.RUNNING]
        for role in closed:
            state = self._agents[role]
            state.transition(AgentStatus.ERROR)
            state.error = message
        for role in closed:
            try:
                self._notify(role)
            except Exception as exc:
                print(f"[devteam] Update listener failed for {role.value}: {exc!r}", file=sys.stderr)

    # --- Iteration ---

    async def submit(self, request: str) -> IterationResult:
        """Run one iteration for *request*.

        Raises ValueError for an invalid request. Returns a `rejected` result
        if an iteration is already in flight, and a `failed` result if the
        pipeline itself breaks; outputs and files produced before the failure
        are kept.
        """
        request = validate_request(request)
        if self.is_running:
            print("[devteam] Iteration already in progress; request ignored.", file=sys.stderr)
            return IterationResult(status="rejected", error="An iteration is already running.")

        self._phase = IterationPhase.PLANNER_RUNNING
        self.last_error = None
        try:
            self._messages.append(ChatMessage(role="user", content=request))
            final_state = await self._graph.ainvoke(
                {
                    "request": request,
                    "dispatched_roles": [],
                    "stage_prompts": {},
                    "completed_roles": [],
                    "files_changed": [],
                }
            )
            self._messages.append(ChatMessage(role="assistant", content=COMPLETION_MESSAGE))
            return IterationResult(status="completed", files_changed=final_state.get("files_changed", []))
        except Exception as exc:
            self._phase = IterationPhase.FAILED
            self.last_error = str(exc) or exc.__class__.__name__
            print(f"[devteam] Orchestration error: {exc!r}", file=sys.stderr)
            self._close_running_roles(self.last_error)
            return IterationResult(status="failed", error=self.last_error)
        finally:
            self._phase = IterationPhase.IDLE
