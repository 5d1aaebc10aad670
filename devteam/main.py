"""Entry point: interactive session that feeds user requests to the agent team."""

import asyncio
import sys
from pathlib import Path

from devteam.agents.prompts import ROLE_TITLES
from devteam.config import get_config
from devteam.orchestrator import Orchestrator
from devteam.state import AgentRunState, AgentStatus, Role
from devteam.utils.exporter import write_archive, write_project

HELP = """\
Type a request for the team, or one of:
  /files              list project files
  /show <path>        print one file
  /status             show each agent's status
  /readme             print the README, if any
  /type [name]        show or change the project type
  /preview <out.html> write the inlined index.html preview
  /export [out.zip]   write the project as a zip archive
  /save [dir]         write the project files to a directory
  /quit               leave the session
"""


def _progress_printer():
    """Return an update listener that prints one line per role status change."""
    last_seen: dict[Role, AgentStatus] = {}

    def on_update(role: Role, state: AgentRunState) -> None:
        if last_seen.get(role) == state.status:
            return
        last_seen[role] = state.status
        line = f"[devteam] {ROLE_TITLES[role]}: {state.status.value}"
        if state.status == AgentStatus.ERROR and state.error:
            line += f" ({state.error})"
        print(line)

    return on_update


def _print_status(orchestrator: Orchestrator) -> None:
    print(f"Project type: {orchestrator.project_type}")
    for role, state in orchestrator.agents.items():
        suffix = f": {state.error}" if state.error else ""
        print(f"  {ROLE_TITLES[role]:<20} {state.status.value:<8} {len(state.output)} chars{suffix}")


def handle_command(orchestrator: Orchestrator, line: str) -> bool:
    """Run one slash command. Returns False when the session should end."""
    command, _, argument = line.strip().partition(" ")
    argument = argument.strip()

    if command == "/quit":
        return False
    if command == "/help":
        print(HELP)
    elif command == "/files":
        if not orchestrator.files:
            print("No files generated yet.")
        for path, project_file in orchestrator.files.items():
            print(f"  {path} ({project_file.language}, {len(project_file.content)} chars)")
    elif command == "/show":
        project_file = orchestrator.files.get(argument)
        print(project_file.content if project_file else f"No file named '{argument}'.")
    elif command == "/status":
        _print_status(orchestrator)
    elif command == "/readme":
        readme = orchestrator.readme()
        print(readme.content if readme else "No README generated yet.")
    elif command == "/type":
        if argument:
            try:
                orchestrator.project_type = argument
            except ValueError as exc:
                print(exc)
        print(f"Project type: {orchestrator.project_type}")
        print("Available: " + ", ".join(get_config().get("project_types", [])))
    elif command == "/preview":
        html = orchestrator.preview()
        if html is None:
            print("No index.html to preview.")
        else:
            target = Path(argument or "preview.html")
            target.write_text(html, encoding="utf-8")
            print(f"Preview written to: {target}")
    elif command == "/export":
        if not orchestrator.files:
            print("No files to export.")
        else:
            print(f"Archive written to: {write_archive(orchestrator.files, argument or None)}")
    elif command == "/save":
        if not orchestrator.files:
            print("No files to save.")
        else:
            try:
                print(f"Project written to: {write_project(orchestrator.files, argument or None)}")
            except ValueError as exc:
                print(exc)
    else:
        print(f"Unknown command '{command}'.\n{HELP}")
    return True


async def run_request(orchestrator: Orchestrator, request: str) -> None:
    """Run one iteration and report its outcome."""
    try:
        result = await orchestrator.submit(request)
    except ValueError as exc:
        print(exc)
        return

    if result.status == "completed":
        reviewer = orchestrator.agents[Role.REVIEWER]
        if reviewer.output:
            print(f"\n--- {ROLE_TITLES[Role.REVIEWER]} ---\n{reviewer.output}\n")
        changed = ", ".join(result.files_changed) or "none"
        print(f"[devteam] Files updated: {changed}")
        print(orchestrator.messages[-1].content)
    elif result.status == "failed":
        print(f"[devteam] Iteration failed: {result.error}. You can re-submit the request.")
    else:
        print(f"[devteam] {result.error}")


async def _repl(orchestrator: Orchestrator) -> None:
    print(HELP)
    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        if not line.strip():
            continue
        if line.startswith("/"):
            if not handle_command(orchestrator, line):
                break
            continue
        await run_request(orchestrator, line)


def main() -> None:
    """CLI entry point. A request as arguments runs one iteration, otherwise start a session."""
    args = sys.argv[1:]
    project_type = None

    if "--type" in args:
        index = args.index("--type")
        if index + 1 >= len(args):
            print("--type needs a project type.", file=sys.stderr)
            sys.exit(2)
        project_type = args[index + 1]
        del args[index:index + 2]

    try:
        orchestrator = Orchestrator(project_type=project_type, on_update=_progress_printer())
    except ValueError as exc:
        print(exc, file=sys.stderr)
        sys.exit(2)

    if args:
        asyncio.run(run_request(orchestrator, " ".join(args)))
    else:
        asyncio.run(_repl(orchestrator))


if __name__ == "__main__":
    main()
