from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .context import ProvisionCtx
from .state_store import clear_step_completed, mark_step_completed, record_error

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str
    description: str

    def is_satisfied(self, ctx: ProvisionCtx) -> bool:
        ...

    def run(self, ctx: ProvisionCtx) -> None:
        ...


class StepOutcome(str, enum.Enum):
    SKIPPED = "skipped"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    step_id: str
    outcome: StepOutcome
    reason: Optional[str] = None


@dataclass
class RunReport:
    results: List[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.outcome is not StepOutcome.FAILED for r in self.results)

    @property
    def ran_steps(self) -> List[str]:
        return [r.step_id for r in self.results if r.outcome is StepOutcome.COMPLETED]

    @property
    def skipped_steps(self) -> List[str]:
        return [r.step_id for r in self.results if r.outcome is StepOutcome.SKIPPED]

    @property
    def failed_step(self) -> Optional[StepResult]:
        for r in self.results:
            if r.outcome is StepOutcome.FAILED:
                return r
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "results": [
                {"step": r.step_id, "outcome": r.outcome.value, **({"reason": r.reason} if r.reason else {})}
                for r in self.results
            ],
        }


def _select(steps: Sequence[Step], start_at: Optional[str], stop_after: Optional[str]) -> List[Step]:
    ids = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in ids:
            raise ValueError(f"Unknown step id: {wanted} (known: {', '.join(ids)})")

    selected: List[Step] = []
    started = start_at is None
    for step in steps:
        if not started:
            if step.step_id != start_at:
                continue
            started = True
        selected.append(step)
        if stop_after is not None and step.step_id == stop_after:
            break
    return selected


def run_pipeline(
    *,
    ctx: ProvisionCtx,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> RunReport:
    """Run steps in order; stop at the first failure (fail-fast).

    A step whose check passes is skipped without side effects. After a step
    runs, its check is evaluated again so that a re-run is guaranteed to skip
    it; a step that still reports unsatisfied counts as failed.
    """

    report = RunReport()
    exe = ctx.state.setdefault("execution", {})

    for step in _select(steps, start_at, stop_after):
        exe["current_step"] = step.step_id

        try:
            if (not force) and step.is_satisfied(ctx):
                logger.info("Skipping step %s (already satisfied)", step.step_id)
                report.results.append(StepResult(step.step_id, StepOutcome.SKIPPED))
                continue

            logger.info("Running step %s: %s", step.step_id, step.description)
            step.run(ctx)
            if not ctx.dry_run:
                # Freshness checks read the completion time, so record it before re-checking.
                mark_step_completed(ctx.state, step.step_id, at=ctx.clock())
                if not step.is_satisfied(ctx):
                    raise RuntimeError(f"{step.step_id} finished but its end state is still not satisfied")
        except Exception as e:
            logger.exception("Step %s failed", step.step_id)
            clear_step_completed(ctx.state, step.step_id)
            record_error(ctx.state, step.step_id, str(e))
            report.results.append(StepResult(step.step_id, StepOutcome.FAILED, reason=str(e)))
            break

        report.results.append(StepResult(step.step_id, StepOutcome.COMPLETED))

    exe["current_step"] = None
    exe["last_run"] = report.as_dict()
    return report
