"""Tests for the async process runner."""

from __future__ import annotations

import sys

import pytest

from copilot.errors import ToolInvocationError
from copilot.validator.runner import ProcessRunner, ToolRun


class TestProcessRunner:
    @pytest.mark.asyncio
    async def test_captures_output_and_exit_code(self) -> None:
        runner = ProcessRunner()
        run = await runner.run([
            sys.executable,
            "-c",
            "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)",
        ])
        assert run.returncode == 3
        assert run.stdout.strip() == "out"
        assert run.stderr.strip() == "err"

    @pytest.mark.asyncio
    async def test_missing_executable(self) -> None:
        runner = ProcessRunner()
        with pytest.raises(ToolInvocationError) as exc_info:
            await runner.run(["/nonexistent/bin/yamale", "-s", "x"])
        assert exc_info.value.tool == "yamale"
        assert "not found" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        runner = ProcessRunner(timeout=0.2)
        with pytest.raises(ToolInvocationError) as exc_info:
            await runner.run([sys.executable, "-c", "import time; time.sleep(5)"])
        assert "timed out" in exc_info.value.detail


def test_tool_name_from_argv() -> None:
    assert ToolRun(argv=["/venv/bin/yamllint", "a.yml"]).tool == "yamllint"
    assert ToolRun().tool == ""
