"""
Tests for the stage state machine and the pipeline runner.
"""

from __future__ import annotations

import pytest

from filestash_provisioner.errors import CommandError, FilesystemError, PrivilegeError
from filestash_provisioner.main import build_steps
from filestash_provisioner.pipeline import ORDER, Stage, advance, run_pipeline


class _Recorder:
    def __init__(self, stage: Stage, exc: BaseException | None = None) -> None:
        self.stage = stage
        self.step_id = stage.value.lower()
        self.exc = exc
        self.calls = 0

    def run(self, ctx) -> None:
        self.calls += 1
        if self.exc is not None:
            raise self.exc


def _steps(**failures: BaseException) -> list[_Recorder]:
    return [_Recorder(s, failures.get(s.value)) for s in ORDER[1:-1]]


# ── Transitions ──────────────────────────────────────────────────────


class TestAdvance:
    def test_happy_path_visits_every_stage_in_order(self):
        seen = [Stage.START]
        stage = Stage.START
        while stage is not Stage.DONE:
            stage = advance(stage, True)
            seen.append(stage)
        assert seen == ORDER

    @pytest.mark.parametrize("stage", ORDER[:-1])
    def test_failure_from_any_running_stage_is_failed(self, stage):
        assert advance(stage, False) is Stage.FAILED

    def test_failed_is_absorbing(self):
        assert advance(Stage.FAILED, True) is Stage.FAILED
        assert advance(Stage.FAILED, False) is Stage.FAILED

    def test_done_is_terminal(self):
        assert advance(Stage.DONE, True) is Stage.DONE


# ── Runner ───────────────────────────────────────────────────────────


class TestRunPipeline:
    def test_all_steps_succeed(self, ctx):
        steps = _steps()
        result = run_pipeline(ctx=ctx, steps=steps)
        assert result.ok
        assert result.stage is Stage.DONE
        assert result.ran_steps == [s.step_id for s in steps]
        assert result.error is None

    def test_stops_at_first_failure(self, ctx):
        steps = _steps(NATIVE_LIB=CommandError(["make"], 2))
        result = run_pipeline(ctx=ctx, steps=steps)

        assert result.stage is Stage.FAILED
        assert result.failed_stage is Stage.NATIVE_LIB
        assert isinstance(result.error, CommandError)
        assert result.ran_steps == ["priv_check", "deps"]
        later = [s for s in steps if ORDER.index(s.stage) > ORDER.index(Stage.NATIVE_LIB)]
        assert all(s.calls == 0 for s in later)

    def test_privilege_failure_runs_nothing_else(self, ctx):
        steps = _steps(PRIV_CHECK=PrivilegeError("not root"))
        result = run_pipeline(ctx=ctx, steps=steps)
        assert result.failed_stage is Stage.PRIV_CHECK
        assert result.ran_steps == []
        assert sum(s.calls for s in steps) == 1

    def test_oserror_is_reported_as_filesystem_error(self, ctx):
        steps = _steps(BUILD_DEPLOY=PermissionError("chmod denied"))
        result = run_pipeline(ctx=ctx, steps=steps)
        assert result.failed_stage is Stage.BUILD_DEPLOY
        assert isinstance(result.error, FilesystemError)
        assert "chmod denied" in str(result.error)

    def test_unexpected_exceptions_propagate(self, ctx):
        steps = _steps(DEPS=KeyError("bug"))
        with pytest.raises(KeyError):
            run_pipeline(ctx=ctx, steps=steps)

    def test_missing_stage_is_rejected_before_running(self, ctx):
        steps = _steps()[:-1]
        with pytest.raises(ValueError, match="REGISTER"):
            run_pipeline(ctx=ctx, steps=steps)
        assert all(s.calls == 0 for s in steps)

    def test_duplicate_stage_is_rejected(self, ctx):
        steps = _steps() + [_Recorder(Stage.DEPS)]
        with pytest.raises(ValueError, match="Duplicate"):
            run_pipeline(ctx=ctx, steps=steps)

    def test_default_steps_cover_every_stage_once(self):
        stages = [s.stage for s in build_steps()]
        assert stages == ORDER[1:-1]
