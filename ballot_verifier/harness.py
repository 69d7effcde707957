"""Harness for running contract verification cases against a deployment.

This module supports:
  * Running a :class:`~ballot_verifier.cases.CaseSuite` concurrently against one
    deployment collaborator.
  * Acquiring the contract handle once per run or once per case.
  * Classifying each outcome as passed, assertion failure or deployment error,
    and logging every case to JSONL.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .cases import CaseSuite, ContractCase, ballot_suite
from .deployment import ContractHandle, Deployment, DeploymentError
from .verifier import CheckResult, ContractVerifier, ValueMismatchError

logger = logging.getLogger(__name__)

STATUS_PASSED = "passed"
STATUS_ASSERTION_FAILED = "assertion_failed"
STATUS_DEPLOYMENT_ERROR = "deployment_error"


@dataclass(frozen=True)
class CaseLog:
    """Serialized case outcome written to JSONL."""

    case_id: str
    suite: str
    description: str
    timestamp: str
    status: str
    message: str
    details: Optional[Dict[str, Any]]
    elapsed_ms: float
    contract_name: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == STATUS_PASSED

    def to_json(self) -> str:
        return json.dumps(
            {
                "case_id": self.case_id,
                "suite": self.suite,
                "description": self.description,
                "timestamp": self.timestamp,
                "status": self.status,
                "message": self.message,
                "details": self.details,
                "elapsed_ms": self.elapsed_ms,
                "contract_name": self.contract_name,
            },
            ensure_ascii=False,
            default=str,
        )


@dataclass
class HarnessResult:
    """Aggregate results for a harness run."""

    passed_count: int
    failed_count: int
    error_count: int
    logs: List[CaseLog]

    @property
    def total(self) -> int:
        return len(self.logs)

    @property
    def all_passed(self) -> bool:
        return self.total > 0 and self.passed_count == self.total


class VerificationHarness:
    """Execute a case suite against a deployment collaborator."""

    def __init__(
        self,
        deployment: Deployment,
        log_path: Union[str, Path],
        suite: Optional[CaseSuite] = None,
        verifier: Optional[ContractVerifier] = None,
        share_handle: bool = True,
    ) -> None:
        self.deployment = deployment
        self.log_path = Path(log_path)
        self.suite = suite if suite is not None else ballot_suite()
        self.verifier = verifier or ContractVerifier()
        self.share_handle = bool(share_handle)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def run(self) -> HarnessResult:
        """Run every case in the suite and return the aggregate result."""
        return asyncio.run(self.run_async())

    async def run_async(self) -> HarnessResult:
        cases = list(self.suite)
        if not cases:
            logger.info("Suite %s has no cases; nothing to run.", self.suite.name)

        logger.info(
            "Running %d case(s) from %s (shared handle: %s, timeout: %gs)",
            len(cases),
            self.suite.name,
            self.share_handle,
            self.verifier.timeout,
        )

        shared_handle: Optional[ContractHandle] = None
        if self.share_handle and cases:
            started = time.perf_counter()
            try:
                shared_handle = await self.verifier.acquire(self.deployment)
            except DeploymentError as exc:
                elapsed_ms = _elapsed_ms(started)
                logger.warning("Could not acquire contract handle: %s", exc)
                failure = CheckResult.fail(str(exc))
                logs = [self._log(case, STATUS_DEPLOYMENT_ERROR, failure, elapsed_ms, None) for case in cases]
                return self._finish(logs)

        logs = list(await asyncio.gather(*(self._run_case(case, shared_handle) for case in cases)))
        return self._finish(logs)

    async def _run_case(self, case: ContractCase, handle: Optional[ContractHandle]) -> CaseLog:
        started = time.perf_counter()
        try:
            if handle is None:
                handle = await self.verifier.acquire(self.deployment)
            result = await case.run(self.verifier, handle)
            status = STATUS_PASSED
        except DeploymentError as exc:
            result = CheckResult.fail(str(exc))
            status = STATUS_DEPLOYMENT_ERROR
        except AssertionError as exc:
            details = None
            if isinstance(exc, ValueMismatchError):
                details = {"actual": exc.actual, "expected": exc.expected}
            result = CheckResult.fail(str(exc), details)
            status = STATUS_ASSERTION_FAILED
        log = self._log(case, status, result, _elapsed_ms(started), handle)

        if log.passed:
            logger.info("%s passed: %s", case.case_id, log.message)
        else:
            logger.warning("%s %s: %s", case.case_id, log.status, log.message)
        return log

    def _log(
        self,
        case: ContractCase,
        status: str,
        result: CheckResult,
        elapsed_ms: float,
        handle: Optional[ContractHandle],
    ) -> CaseLog:
        return CaseLog(
            case_id=case.case_id,
            suite=self.suite.name,
            description=case.description,
            timestamp=datetime.now(timezone.utc).isoformat(),
            status=status,
            message=result.message,
            details=result.details,
            elapsed_ms=elapsed_ms,
            contract_name=getattr(handle, "contract_name", None),
        )

    def _finish(self, logs: List[CaseLog]) -> HarnessResult:
        with self.log_path.open("w", encoding="utf-8") as log_file:
            for log in logs:
                log_file.write(log.to_json() + "\n")

        passed = sum(1 for log in logs if log.status == STATUS_PASSED)
        failed = sum(1 for log in logs if log.status == STATUS_ASSERTION_FAILED)
        errors = sum(1 for log in logs if log.status == STATUS_DEPLOYMENT_ERROR)
        logger.info("Suite %s finished: %d passed, %d failed, %d errors", self.suite.name, passed, failed, errors)
        return HarnessResult(passed_count=passed, failed_count=failed, error_count=errors, logs=logs)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000.0, 3)


__all__ = [
    "CaseLog",
    "HarnessResult",
    "STATUS_ASSERTION_FAILED",
    "STATUS_DEPLOYMENT_ERROR",
    "STATUS_PASSED",
    "VerificationHarness",
]
