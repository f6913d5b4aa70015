from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence

from .context import ProvisionContext
from .errors import FilesystemError, ProvisionError

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    START = "START"
    PRIV_CHECK = "PRIV_CHECK"
    DEPS = "DEPS"
    NATIVE_LIB = "NATIVE_LIB"
    TOOLCHAIN = "TOOLCHAIN"
    ACCOUNT = "ACCOUNT"
    BUILD_DEPLOY = "BUILD_DEPLOY"
    REGISTER = "REGISTER"
    DONE = "DONE"
    FAILED = "FAILED"


ORDER: List[Stage] = [
    Stage.START,
    Stage.PRIV_CHECK,
    Stage.DEPS,
    Stage.NATIVE_LIB,
    Stage.TOOLCHAIN,
    Stage.ACCOUNT,
    Stage.BUILD_DEPLOY,
    Stage.REGISTER,
    Stage.DONE,
]

TERMINAL = frozenset({Stage.DONE, Stage.FAILED})


def advance(stage: Stage, ok: bool) -> Stage:
    """Pure transition: the stage that follows `stage` given its outcome."""

    if stage in TERMINAL:
        return stage
    if not ok:
        return Stage.FAILED
    return ORDER[ORDER.index(stage) + 1]


class Step(Protocol):
    """A single pipeline stage."""

    step_id: str
    stage: Stage

    def run(self, ctx: ProvisionContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    stage: Stage
    ran_steps: List[str]
    failed_stage: Optional[Stage] = None
    error: Optional[ProvisionError] = None

    @property
    def ok(self) -> bool:
        return self.stage is Stage.DONE


def _index_steps(steps: Sequence[Step]) -> Dict[Stage, Step]:
    by_stage: Dict[Stage, Step] = {}
    for step in steps:
        if step.stage in by_stage:
            raise ValueError(f"Duplicate step for stage {step.stage.value}")
        by_stage[step.stage] = step
    missing = [s.value for s in ORDER[1:-1] if s not in by_stage]
    if missing:
        raise ValueError(f"No step registered for: {', '.join(missing)}")
    return by_stage


def run_pipeline(*, ctx: ProvisionContext, steps: Sequence[Step]) -> PipelineResult:
    """Run every stage in order, stopping at the first failure.

    There is no resume and no rollback: a failed run starts again from START.
    """

    by_stage = _index_steps(steps)
    ran: List[str] = []

    stage = advance(Stage.START, True)
    while stage not in TERMINAL:
        step = by_stage[stage]
        logger.info("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except ProvisionError as e:
            logger.debug("Step %s failed", step.step_id, exc_info=True)
            return PipelineResult(stage=advance(stage, False), ran_steps=ran, failed_stage=stage, error=e)
        except OSError as e:
            err = FilesystemError(f"{step.step_id}: {e}")
            err.__cause__ = e
            logger.debug("Step %s failed", step.step_id, exc_info=True)
            return PipelineResult(stage=advance(stage, False), ran_steps=ran, failed_stage=stage, error=err)
        ran.append(step.step_id)
        stage = advance(stage, True)

    return PipelineResult(stage=stage, ran_steps=ran)
