"""LangGraph StateGraph for one iteration of the agent team.

planner -> dispatch -> specialist x6 (Send fan-out, run concurrently) -> merge -> reviewer -> END

`dispatch` takes one snapshot after the planner finishes and builds all six
specialist prompts from it before any of them is marked running. Siblings
never see each other's output from this iteration, while done outputs from
the previous iteration stay visible until replaced. The specialist branches
share one superstep, so `merge` only runs after every one of them has
finished, whether it produced text or an error. Role records and the file
set live on the orchestrator; the graph state only carries bookkeeping for
the iteration.
"""

from typing import TYPE_CHECKING

from langgraph.graph import END, StateGraph
from langgraph.types import Send

from devteam.agents.context import build_context
from devteam.state import PARALLEL_ROLES, AgentStatus, IterationPhase, IterationState, Role
from devteam.utils.extractor import extract_files

if TYPE_CHECKING:
    from devteam.orchestrator import Orchestrator


def fan_out(state: IterationState) -> list[Send]:
    """Conditional edge: one specialist branch per mid-pipeline role."""
    return [
        Send("specialist", {"role": role, "prompt": state["stage_prompts"][role.value]})
        for role in PARALLEL_ROLES
    ]


def build_iteration_graph(team: "Orchestrator"):
    """Compile the iteration graph with nodes bound to *team*."""

    async def planner_node(state: IterationState) -> dict:
        team.set_phase(IterationPhase.PLANNER_RUNNING)
        team.mark_running(Role.PLANNER)
        await team.run_role(Role.PLANNER, build_context(Role.PLANNER, team.snapshot()))
        return {"completed_roles": [Role.PLANNER.value]}

    async def dispatch_node(state: IterationState) -> dict:
        """Build all six specialist prompts from one snapshot, then mark them running.

        Prompts are rendered before any output is cleared, so done outputs
        from the previous iteration stay visible until replaced.
        """
        team.set_phase(IterationPhase.PARALLEL_RUNNING)
        snapshot = team.snapshot()
        stage_prompts = {role.value: build_context(role, snapshot) for role in PARALLEL_ROLES}
        for role in PARALLEL_ROLES:
            team.mark_running(role)
        return {
            "dispatched_roles": [role.value for role in PARALLEL_ROLES],
            "stage_prompts": stage_prompts,
        }

    async def specialist_node(payload: dict) -> dict:
        role = payload["role"]
        await team.run_role(role, payload["prompt"])
        return {"completed_roles": [role.value]}

    async def merge_node(state: IterationState) -> dict:
        """Extract files from each finished specialist in declaration order and merge once."""
        agents = team.agents
        unfinished = [role.value for role in PARALLEL_ROLES if agents[role].status == AgentStatus.RUNNING]
        if unfinished:
            raise RuntimeError(f"Merge reached with specialists still running: {unfinished}")

        extracted = []
        for role in PARALLEL_ROLES:
            if agents[role].status == AgentStatus.DONE:
                extracted.extend(extract_files(agents[role].output))
        return {"files_changed": team.apply_files(extracted)}

    async def reviewer_node(state: IterationState) -> dict:
        team.set_phase(IterationPhase.REVIEWER_RUNNING)
        team.mark_running(Role.REVIEWER)
        await team.run_role(Role.REVIEWER, build_context(Role.REVIEWER, team.snapshot()))
        return {"completed_roles": [Role.REVIEWER.value]}

    # --- Build the graph ---

    workflow = StateGraph(IterationState)

    workflow.add_node("planner", planner_node)
    workflow.add_node("dispatch", dispatch_node)
    workflow.add_node("specialist", specialist_node)
    workflow.add_node("merge", merge_node)
    workflow.add_node("reviewer", reviewer_node)

    workflow.set_entry_point("planner")

    workflow.add_edge("planner", "dispatch")
    workflow.add_conditional_edges("dispatch", fan_out, ["specialist"])
    workflow.add_edge("specialist", "merge")
    workflow.add_edge("merge", "reviewer")
    workflow.add_edge("reviewer", END)

    return workflow.compile()
