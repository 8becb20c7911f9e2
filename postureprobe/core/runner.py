"""
Check Runner

Executes the requested checks in their declared order and assembles one
Finding per executed check into a Report. A failing check yields an
error Finding; it never stops the remaining checks.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence

from postureprobe.core.errors import ERROR_GENERIC, PrivilegeError, ProbeError
from postureprobe.core.schemas import Finding, Report
from postureprobe.core.state import StateProvider
from postureprobe.utils.logger import Logger

ALL_CHECKS = "all"

ELEVATION_HINT = "Administrator privileges required. Re-run the probe from an elevated prompt."


@dataclass(frozen=True)
class CheckOutcome:
    """What a check computes before the runner wraps it in a Finding."""
    score: int
    result_data: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class CheckDefinition:
    """A registered check: identity, fixed risk weight and the function to run."""
    name: str
    display_name: str
    description: str
    risk_weight: int
    run: Callable[[StateProvider], CheckOutcome]


class CheckRunner:
    """Sequential check executor with per-check error containment."""

    def __init__(self, provider: StateProvider, checks: Sequence[CheckDefinition]):
        self.provider = provider
        self.checks = list(checks)
        self.logger = Logger()

    @property
    def check_names(self) -> List[str]:
        return [check.name for check in self.checks]

    def select(self, requested: Optional[Iterable[str]] = None) -> List[CheckDefinition]:
        """Checks to execute, in declared order. Empty or 'all' selects everything."""
        names: FrozenSet[str] = frozenset(requested or ())
        unknown = names - set(self.check_names) - {ALL_CHECKS}
        if unknown:
            self.logger.debug(f"Ignoring unknown check names: {sorted(unknown)}")

        if not names or ALL_CHECKS in names:
            return list(self.checks)
        return [check for check in self.checks if check.name in names]

    def run(self, requested: Optional[Iterable[str]] = None) -> Report:
        findings = [self._execute(check) for check in self.select(requested)]
        return Report(findings)

    def _execute(self, check: CheckDefinition) -> Finding:
        self.logger.info(f"Running check {check.name}...")
        try:
            outcome = check.run(self.provider)
        except PrivilegeError as e:
            self.logger.warning(f"{check.name}: {e.message}")
            return self._error_finding(check, e.code, f"{ELEVATION_HINT} ({e.message})")
        except ProbeError as e:
            self.logger.error(f"{check.name} failed: {e.message}")
            return self._error_finding(check, e.code, e.message)
        except Exception as e:
            self.logger.error(f"{check.name} failed unexpectedly: {e}")
            return self._error_finding(check, ERROR_GENERIC, str(e) or type(e).__name__)

        self.logger.success(f"{check.name}: score {outcome.score}, {len(outcome.result_data)} result items")
        return Finding(
            name=check.name,
            display_name=check.display_name,
            description=check.description,
            score=outcome.score,
            result_data=outcome.result_data,
            risk_score=check.risk_weight,
        )

    @staticmethod
    def _error_finding(check: CheckDefinition, code: int, message: str) -> Finding:
        return Finding(
            name=check.name,
            display_name=check.display_name,
            description=check.description,
            risk_score=check.risk_weight,
            error_code=code,
            error_message=message,
        )
