"""
TuningExecutor - idempotent apply of TuningParameter rows.

For each row:
1. READ - current value through the row's read function
2. COMPARE - against the desired value
3. WRITE - only when different

A row that already matches is logged and left alone, so re-running any
operation performs no writes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..logs import get_logger
from .parameters import TuningParameter, ParameterKind

logger = get_logger("tuning")


class Outcome(str, Enum):
    """What happened to a parameter."""
    APPLIED = "APPLIED"
    ALREADY_SET = "ALREADY_SET"
    FAILED = "FAILED"


@dataclass
class ParameterResult:
    """Result of applying one parameter."""
    key: str
    kind: ParameterKind
    outcome: Outcome
    before: Optional[str]
    desired: str

    @property
    def changed(self) -> bool:
        return self.outcome != Outcome.ALREADY_SET


class TuningExecutor:
    """Applies parameter rows with the read-compare-write pattern."""

    def apply(self, param: TuningParameter) -> ParameterResult:
        current = param.read()

        if param.matches(current):
            logger.info(param.skip_message)
            return ParameterResult(
                key=param.key,
                kind=param.kind,
                outcome=Outcome.ALREADY_SET,
                before=current,
                desired=param.desired,
            )

        logger.debug(f"{param.key}: {current!r} -> {param.desired!r}")
        ok = param.write(param.desired)

        return ParameterResult(
            key=param.key,
            kind=param.kind,
            outcome=Outcome.APPLIED if ok else Outcome.FAILED,
            before=current,
            desired=param.desired,
        )

    def apply_all(self, params: List[TuningParameter]) -> List[ParameterResult]:
        """Apply rows in order. A failed row does not stop the rest."""
        return [self.apply(param) for param in params]
