"""Tests for the terminal session in devteam.main."""

import zipfile
from unittest.mock import patch

import pytest

from devteam.main import _progress_printer, handle_command, main, run_request
from devteam.state import AgentRunState, AgentStatus, Role


class TestHandleCommand:
    def test_quit_ends_session(self, make_orchestrator):
        orchestrator, _ = make_orchestrator()
        assert handle_command(orchestrator, "/quit") is False

    def test_files_when_empty(self, make_orchestrator, capsys):
        orchestrator, _ = make_orchestrator()
        assert handle_command(orchestrator, "/files") is True
        assert "No files generated yet." in capsys.readouterr().out

    def test_unknown_command_prints_help(self, make_orchestrator, capsys):
        orchestrator, _ = make_orchestrator()
        handle_command(orchestrator, "/dance")
        out = capsys.readouterr().out
        assert "Unknown command '/dance'" in out
        assert "/export" in out

    def test_type_changes_project_type(self, make_orchestrator, capsys):
        orchestrator, _ = make_orchestrator()
        handle_command(orchestrator, "/type CLI Tool")
        assert orchestrator.project_type == "CLI Tool"
        assert "Project type: CLI Tool" in capsys.readouterr().out

    def test_type_rejects_unknown(self, make_orchestrator, capsys):
        orchestrator, _ = make_orchestrator()
        handle_command(orchestrator, "/type Toaster")
        assert orchestrator.project_type == "Web App (Single Page)"
        assert "Unknown project type" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_file_commands_after_iteration(self, make_orchestrator, todo_scripts, tmp_path, capsys):
        orchestrator, _ = make_orchestrator(todo_scripts)
        await orchestrator.submit("build a todo list app")
        capsys.readouterr()

        handle_command(orchestrator, "/files")
        assert "index.html (html" in capsys.readouterr().out

        handle_command(orchestrator, "/show index.html")
        assert "<html><body>Todo</body></html>" in capsys.readouterr().out

        handle_command(orchestrator, f"/preview {tmp_path / 'preview.html'}")
        assert (tmp_path / "preview.html").read_text(encoding="utf-8") == "<html><body>Todo</body></html>"

        handle_command(orchestrator, f"/export {tmp_path / 'out.zip'}")
        with zipfile.ZipFile(tmp_path / "out.zip") as archive:
            assert archive.namelist() == ["index.html"]

        handle_command(orchestrator, f"/save {tmp_path / 'site'}")
        assert (tmp_path / "site" / "index.html").exists()

    def test_status_lists_every_role(self, make_orchestrator, capsys):
        orchestrator, _ = make_orchestrator()
        handle_command(orchestrator, "/status")
        out = capsys.readouterr().out
        for title in ("Product Manager", "System Architect", "Reviewer"):
            assert title in out


class TestRunRequest:
    @pytest.mark.asyncio
    async def test_prints_reviewer_summary_and_changed_files(self, make_orchestrator, todo_scripts, capsys):
        orchestrator, _ = make_orchestrator(todo_scripts)

        await run_request(orchestrator, "build a todo list app")

        out = capsys.readouterr().out
        assert "Commit: add todo app" in out
        assert "Files updated: index.html" in out

    @pytest.mark.asyncio
    async def test_invalid_request_reported(self, make_orchestrator, capsys):
        orchestrator, generator = make_orchestrator()

        await run_request(orchestrator, "  ")

        assert "non-empty" in capsys.readouterr().out
        assert generator.calls == []


class TestProgressPrinter:
    def test_prints_once_per_status_change(self, capsys):
        on_update = _progress_printer()
        state = AgentRunState(role=Role.QA, status=AgentStatus.RUNNING)

        on_update(Role.QA, state)
        state.output = "chunk"
        on_update(Role.QA, state)
        state.status = AgentStatus.ERROR
        state.error = "boom"
        on_update(Role.QA, state)

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["[devteam] QA Engineer: running", "[devteam] QA Engineer: error (boom)"]


class TestMain:
    @patch("devteam.main.asyncio.run")
    @patch("devteam.main.Orchestrator")
    def test_arguments_run_single_request(self, MockOrchestrator, mock_run, mock_config):
        with patch("sys.argv", ["devteam", "--type", "CLI Tool", "build", "a", "todo", "cli"]):
            main()

        assert MockOrchestrator.call_args.kwargs["project_type"] == "CLI Tool"
        mock_run.assert_called_once()
        mock_run.call_args.args[0].close()

    def test_type_without_value_exits(self, mock_config):
        with patch("sys.argv", ["devteam", "--type"]):
            with pytest.raises(SystemExit):
                main()
