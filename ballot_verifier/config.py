"""Environment-driven settings for contract verification runs."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from pathlib import Path

from .cases import BALLOT_WINNER_HEX
from .encoding import get_decoder, to_bytes
from .verifier import DEFAULT_ADDRESS_PATTERN, DEFAULT_TIMEOUT_SECONDS

_DEFAULT_LOG_PATH = "artifacts/contract_checks.jsonl"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag (got {raw!r}).")


@dataclass(frozen=True)
class HarnessConfig:
    """Settings shared by the CLI and the harness."""

    expected_winner: str = BALLOT_WINNER_HEX
    call_timeout: float = DEFAULT_TIMEOUT_SECONDS
    address_pattern: str = DEFAULT_ADDRESS_PATTERN
    decoder: str = "ascii"
    log_path: Path = Path(_DEFAULT_LOG_PATH)
    share_handle: bool = True

    def __post_init__(self) -> None:
        to_bytes(self.expected_winner)
        if not math.isfinite(self.call_timeout) or self.call_timeout <= 0:
            raise ValueError("call_timeout must be a finite, positive number of seconds.")
        try:
            re.compile(self.address_pattern)
        except re.error as exc:
            raise ValueError(f"address_pattern is not a valid regular expression: {exc}") from exc
        get_decoder(self.decoder)

    @classmethod
    def from_env(cls) -> "HarnessConfig":
        """Construct configuration from BALLOT_* environment variables."""
        raw_timeout = os.getenv("BALLOT_CALL_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            call_timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"BALLOT_CALL_TIMEOUT must be numeric (got {raw_timeout!r}).") from exc
        return cls(
            expected_winner=os.getenv("BALLOT_EXPECTED_WINNER", BALLOT_WINNER_HEX).strip(),
            call_timeout=call_timeout,
            address_pattern=os.getenv("BALLOT_ADDRESS_PATTERN", DEFAULT_ADDRESS_PATTERN),
            decoder=os.getenv("BALLOT_DECODER", "ascii").strip(),
            log_path=Path(os.getenv("BALLOT_LOG_PATH", _DEFAULT_LOG_PATH)),
            share_handle=_parse_bool(os.getenv("BALLOT_SHARE_HANDLE", "true"), "BALLOT_SHARE_HANDLE"),
        )


__all__ = ["HarnessConfig"]
