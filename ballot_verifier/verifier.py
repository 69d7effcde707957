"""Checks run against a deployed ballot contract handle.

Each check is a one-shot request/response against the handle. A passing check
returns a :class:`CheckResult`; a failing one raises. Value mismatches raise
:class:`ValueMismatchError` (an ``AssertionError``) while anything that keeps the
harness from reaching the contract raises
:class:`~ballot_verifier.deployment.DeploymentError`, so reporters can tell the
two apart.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Union

from .deployment import ContractHandle, Deployment, DeploymentError
from .encoding import EncodedValue, ValueDecoder, get_decoder, to_bytes, to_hex

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"

_T = TypeVar("_T")


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single contract check."""

    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None

    @staticmethod
    def ok(message: str = "", details: Optional[Dict[str, Any]] = None) -> "CheckResult":
        return CheckResult(True, message, details)

    @staticmethod
    def fail(message: str, details: Optional[Dict[str, Any]] = None) -> "CheckResult":
        return CheckResult(False, message, details)


class ValueMismatchError(AssertionError):
    """Raised when an observed contract value differs from the expected one."""

    def __init__(self, message: str, *, actual: Any, expected: Any) -> None:
        super().__init__(message)
        self.actual = actual
        self.expected = expected


class ContractVerifier:
    """Run deploy and winner-name checks against contract handles."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        address_pattern: Union[str, re.Pattern[str]] = DEFAULT_ADDRESS_PATTERN,
        decoder: Union[str, ValueDecoder] = "ascii",
    ) -> None:
        if not math.isfinite(timeout) or timeout <= 0:
            raise ValueError("timeout must be a finite, positive number of seconds.")
        self.timeout = float(timeout)
        self._address_pattern = re.compile(address_pattern) if isinstance(address_pattern, str) else address_pattern
        self._decoder = get_decoder(decoder) if isinstance(decoder, str) else decoder

    # ------------------------------------------------------------------
    # Collaborator access
    # ------------------------------------------------------------------

    async def acquire(self, deployment: Deployment) -> ContractHandle:
        """Return the deployed handle, converting failures to DeploymentError."""
        handle = await self._call(deployment.deployed, "deployed()")
        if handle is None:
            raise DeploymentError("deployed() returned no contract handle.")
        return handle

    async def _call(self, request: Callable[[], Awaitable[_T]], label: str) -> _T:
        try:
            return await asyncio.wait_for(request(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise DeploymentError(f"{label} timed out after {self.timeout:g}s.") from exc
        except DeploymentError:
            raise
        except Exception as exc:
            raise DeploymentError(f"{label} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    async def check_deployed(self, handle: Optional[ContractHandle]) -> CheckResult:
        """Assert that the handle carries a non-empty, well-formed address."""
        if handle is None:
            raise DeploymentError("No contract handle supplied.")
        address = getattr(handle, "address", None)
        logger.info("Contract address: %s", address)

        expected = f"address matching {self._address_pattern.pattern}"
        if not isinstance(address, str) or address == "":
            raise ValueMismatchError(
                f"Contract is not deployed: expected {expected}, got {address!r}.",
                actual=address,
                expected=self._address_pattern.pattern,
            )
        if not self._address_pattern.match(address):
            raise ValueMismatchError(
                f"Malformed contract address: expected {expected}, got {address!r}.",
                actual=address,
                expected=self._address_pattern.pattern,
            )
        return CheckResult.ok("Contract deployed.", {"address": address})

    async def check_winner_name(self, handle: Optional[ContractHandle], expected_encoded: EncodedValue) -> CheckResult:
        """Assert that ``winnerName()`` returns exactly ``expected_encoded``."""
        if handle is None:
            raise DeploymentError("No contract handle supplied.")
        expected_raw = to_bytes(expected_encoded)

        raw_value = await self._call(handle.winner_name, "winnerName()")
        logger.debug("winnerName() raw payload: %r", raw_value)
        try:
            actual_raw = to_bytes(raw_value)
        except (TypeError, ValueError) as exc:
            raise ValueMismatchError(
                f"winnerName() returned an undecodable payload {raw_value!r}; expected {to_hex(expected_raw)}.",
                actual=raw_value,
                expected=to_hex(expected_raw),
            ) from exc

        decoded = self._decoder.decode(actual_raw)
        logger.info("Winner name: %s", decoded)

        details = {
            "actual": to_hex(actual_raw),
            "expected": to_hex(expected_raw),
            "decoded": decoded,
        }
        if actual_raw != expected_raw:
            raise ValueMismatchError(
                "winnerName() mismatch: expected {expected} ({expected_text!r}) got {actual} ({actual_text!r}).".format(
                    expected=details["expected"],
                    expected_text=self._decoder.decode(expected_raw),
                    actual=details["actual"],
                    actual_text=decoded,
                ),
                actual=details["actual"],
                expected=details["expected"],
            )
        return CheckResult.ok("Winner name matches.", details)


__all__ = [
    "CheckResult",
    "ContractVerifier",
    "DEFAULT_ADDRESS_PATTERN",
    "DEFAULT_TIMEOUT_SECONDS",
    "ValueMismatchError",
]
