"""Verification cases for the deployed ballot contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterable, Iterator, List, Sequence

from .deployment import ContractHandle
from .encoding import EncodedValue, to_bytes
from .verifier import CheckResult, ContractVerifier

# bytes32 encoding of "Manolo", the winner the ballot migration votes in.
BALLOT_WINNER_HEX = "0x4d616e6f6c6f0000000000000000000000000000000000000000000000000000"

CheckFunc = Callable[[ContractVerifier, ContractHandle], Awaitable[CheckResult]]


@dataclass(frozen=True)
class ContractCase:
    case_id: str
    description: str
    check: CheckFunc
    tags: Sequence[str] = field(default_factory=tuple)

    async def run(self, verifier: ContractVerifier, handle: ContractHandle) -> CheckResult:
        return await self.check(verifier, handle)


class CaseSuite:
    """Ordered collection of cases executed together by the harness."""

    def __init__(self, name: str, cases: Iterable[ContractCase] = ()) -> None:
        self.name = name
        self._cases: Dict[str, ContractCase] = {}
        for case in cases:
            self.add(case)

    def add(self, case: ContractCase) -> None:
        if case.case_id in self._cases:
            raise ValueError(f"Case '{case.case_id}' is already part of suite '{self.name}'.")
        self._cases[case.case_id] = case

    @property
    def case_ids(self) -> List[str]:
        return list(self._cases)

    def __iter__(self) -> Iterator[ContractCase]:
        return iter(list(self._cases.values()))

    def __len__(self) -> int:
        return len(self._cases)


def ballot_cases(expected_winner: EncodedValue = BALLOT_WINNER_HEX) -> List[ContractCase]:
    """Return the deploy and winner-name cases for the ballot contract."""
    expected_raw = to_bytes(expected_winner)

    async def _check_deployed(verifier: ContractVerifier, handle: ContractHandle) -> CheckResult:
        return await verifier.check_deployed(handle)

    async def _check_winner(verifier: ContractVerifier, handle: ContractHandle) -> CheckResult:
        return await verifier.check_winner_name(handle, expected_raw)

    return [
        ContractCase(
            case_id="BALLOT-DEPLOY-001",
            description="Should deploy the smart contract properly",
            check=_check_deployed,
            tags=("deploy",),
        ),
        ContractCase(
            case_id="BALLOT-WINNER-001",
            description="Should display the winnerName",
            check=_check_winner,
            tags=("accessor", "winner_name"),
        ),
    ]


def ballot_suite(expected_winner: EncodedValue = BALLOT_WINNER_HEX) -> CaseSuite:
    """Build the suite run against a ballot deployment."""
    return CaseSuite("BallotSmartContract", ballot_cases(expected_winner))


__all__ = [
    "BALLOT_WINNER_HEX",
    "CaseSuite",
    "CheckFunc",
    "ContractCase",
    "ballot_cases",
    "ballot_suite",
]
