"""Context Builder: assembles the role-specific prompt from an iteration snapshot.

Sections, in order: project type, recent conversation history, current
project files, then the completed output of whichever other roles this
role is allowed to read. The builder only reads the snapshot.
"""

from devteam.agents.prompts import ROLE_TITLES
from devteam.config import get_config
from devteam.state import AgentStatus, IterationContext, Role

SECTION_TITLES = {
    Role.PLANNER: "PLANNER DIRECTIVE",
    Role.ARCHITECT: "ARCHITECT OUTPUT",
    Role.DESIGNER: "DESIGNER OUTPUT",
    Role.FRONTEND: "FRONTEND CHANGES",
    Role.BACKEND: "BACKEND CHANGES",
}

_PLAN = (Role.PLANNER,)
_DESIGN = (Role.ARCHITECT, Role.DESIGNER)
_CODE = (Role.FRONTEND, Role.BACKEND)

# Consumer role -> producer roles whose completed output it may read.
VISIBILITY = {
    Role.PLANNER: (),
    Role.ARCHITECT: _PLAN,
    Role.DESIGNER: _PLAN,
    Role.FRONTEND: _PLAN + _DESIGN,
    Role.BACKEND: _PLAN + _DESIGN,
    Role.QA: _PLAN + _DESIGN + _CODE,
    Role.DOCS: _PLAN + _DESIGN + _CODE,
    Role.REVIEWER: _PLAN + _DESIGN + _CODE,
}


def _visible_outputs(role: Role, context: IterationContext) -> list[tuple[Role, str]]:
    visible = []
    for source in VISIBILITY[role]:
        if source == role:
            continue
        state = context.agents.get(source)
        if state is None or state.status != AgentStatus.DONE or not state.output:
            continue
        visible.append((source, state.output))
    return visible


def build_context(role: Role, context: IterationContext, history_window: int | None = None) -> str:
    """Return the full user prompt for *role* built from *context*."""
    if history_window is None:
        history_window = get_config().get("history_window", 10)

    parts = [f"Project Type: {context.project_type}\n"]

    parts.append("--- CONVERSATION HISTORY ---")
    recent = context.messages[-history_window:] if history_window > 0 else ()
    for message in recent:
        parts.append(f"{message.role.upper()}: {message.content}")
    parts.append("")

    if context.files:
        parts.append("--- EXISTING PROJECT FILES ---")
        for project_file in context.files.values():
            parts.append(f"File: {project_file.path}\n```{project_file.language}\n{project_file.content}\n```\n")

    for source, output in _visible_outputs(role, context):
        parts.append(f"--- {SECTION_TITLES[source]} ---\n{output}\n")

    parts.append(
        f"Perform your role as {ROLE_TITLES[role]} for the latest user request.\n"
        "If you are generating code, return the COMPLETE file content for any file you touch."
    )
    return "\n".join(parts)
