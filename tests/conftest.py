"""Shared fixtures for the devteam test suite."""

import asyncio

import pytest
from unittest.mock import patch

from devteam.agents.invoker import AgentInvoker
from devteam.orchestrator import Orchestrator
from devteam.state import PARALLEL_ROLES, Role


class ScriptedGenerator:
    """Stand-in for the generation capability.

    `scripts` maps a role to the fragments it streams, or to an exception it
    raises. A tuple of scripts per role is consumed one per call, so repeated
    iterations can stream different text.
    """

    def __init__(self, scripts=None, delay: float = 0.0):
        self.scripts = scripts or {}
        self.delay = delay
        self.calls = []
        self.active = 0
        self.peak_active = 0

    def _next_script(self, role):
        script = self.scripts.get(role, [f"{role.value} notes"])
        if isinstance(script, tuple):
            # Tuple of per-call scripts
            index = sum(1 for call in self.calls if call["role"] == role) - 1
            return script[min(index, len(script) - 1)]
        return script

    async def __call__(self, role, system_instruction, prompt, temperature):
        self.calls.append({"role": role, "system": system_instruction, "prompt": prompt, "temperature": temperature})
        script = self._next_script(role)
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            if isinstance(script, BaseException):
                await asyncio.sleep(self.delay)
                raise script
            for fragment in script:
                await asyncio.sleep(self.delay)
                yield fragment
        finally:
            self.active -= 1

    def prompt_for(self, role, call_index: int = -1) -> str:
        prompts = [call["prompt"] for call in self.calls if call["role"] == role]
        return prompts[call_index]


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "role_models": {role.value: {"provider": "google", "model": "test-model"} for role in Role},
        "temperature": 0.7,
        "history_window": 10,
        "llm_max_retries": 2,
        "llm_retry_wait_min": 0,
        "llm_retry_wait_max": 0,
        "max_request_chars": 500,
        "project_types": ["Web App (Single Page)", "CLI Tool"],
        "default_project_type": "Web App (Single Page)",
        "output_dir": "./output/project",
        "archive_name": "project-files.zip",
    }
    with patch("devteam.config._config", test_config):
        yield test_config


@pytest.fixture
def todo_scripts():
    """One iteration of a team building a todo app; only Frontend writes a file."""
    scripts = {role: [f"{role.value} ", "notes"] for role in PARALLEL_ROLES}
    scripts[Role.PLANNER] = ["## Current Objective\n", "Build a todo list app."]
    scripts[Role.FRONTEND] = [
        "Here is the UI.\n",
        "|||FILE:index.html|||\n<html><body>Todo</body></html>\n",
        "|||ENDFILE|||\nDone.",
    ]
    scripts[Role.REVIEWER] = ["Looks good.\n", "Commit: add todo app"]
    return scripts


@pytest.fixture
def make_orchestrator(mock_config):
    """Build an Orchestrator wired to a ScriptedGenerator."""

    def _make(scripts=None, delay: float = 0.0, on_update=None):
        generator = ScriptedGenerator(scripts, delay=delay)
        orchestrator = Orchestrator(invoker=AgentInvoker(generate=generator), on_update=on_update)
        return orchestrator, generator

    return _make
