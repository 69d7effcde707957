"""Deployment collaborator interfaces and an in-memory ballot deployment.

Compiling and deploying contracts happens elsewhere (Truffle, Hardhat, a live
node). The harness only needs something that can hand back a deployed contract
handle, described here by the :class:`Deployment` and :class:`ContractHandle`
protocols. :class:`MockDeployment` implements them from a JSON fixture so that
checks can run offline and deterministically.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .encoding import EncodedValue, to_bytes


class DeploymentError(Exception):
    """Raised when a contract handle or one of its accessors cannot be reached."""


class ContractHandle(Protocol):
    """A deployed, address-bearing contract instance."""

    address: str

    async def winner_name(self) -> EncodedValue:
        """Return the raw encoded ``winnerName`` value."""


class Deployment(Protocol):
    """External collaborator that returns deployed contract handles."""

    async def deployed(self) -> ContractHandle:
        """Return the handle of the deployed contract instance."""


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class MockBallotContract:
    """In-memory ballot contract exposing the read-only accessors under test."""

    def __init__(
        self,
        address: str,
        winner_name: EncodedValue,
        *,
        contract_name: str = "ballot",
        latency_seconds: float = 0.0,
        fail_calls: bool = False,
    ) -> None:
        self.address = address
        self.contract_name = contract_name
        self._winner_name = winner_name
        self._latency_seconds = latency_seconds
        self._fail_calls = fail_calls
        self.call_count = 0

    async def winner_name(self) -> EncodedValue:
        self.call_count += 1
        if self._latency_seconds:
            await asyncio.sleep(self._latency_seconds)
        if self._fail_calls:
            raise ConnectionError(f"Call to {self.contract_name}.winnerName() at {self.address or '<none>'} failed.")
        return self._winner_name


class MockDeployment:
    """Deployment that always resolves to the same in-memory contract."""

    def __init__(
        self,
        contract: Optional[MockBallotContract] = None,
        *,
        fail_deploy: bool = False,
        latency_seconds: float = 0.0,
    ) -> None:
        self.contract = contract
        self._fail_deploy = fail_deploy
        self._latency_seconds = latency_seconds
        self.deploy_calls = 0

    async def deployed(self) -> MockBallotContract:
        self.deploy_calls += 1
        if self._latency_seconds:
            await asyncio.sleep(self._latency_seconds)
        if self._fail_deploy or self.contract is None:
            raise ConnectionError("Contract has not been deployed to the configured network.")
        return self.contract


# ---------------------------------------------------------------------------
# Fixture loading
# ---------------------------------------------------------------------------


class DeploymentFixture(BaseModel):
    """On-disk description of an in-memory deployment."""

    model_config = ConfigDict(extra="forbid")

    contract_name: str = "ballot"
    address: str
    winner_name: str
    fail_deploy: bool = False
    fail_calls: bool = False
    latency_seconds: float = Field(default=0.0, ge=0.0)

    @field_validator("contract_name", "address", "winner_name", mode="before")
    @classmethod
    def strip_strings(cls, value: Any) -> Any:
        """Normalize string inputs by trimming whitespace."""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("winner_name")
    @classmethod
    def validate_winner_name(cls, value: str) -> str:
        to_bytes(value)
        return value

    def build(self) -> MockDeployment:
        """Create the deployment described by this fixture."""
        contract = MockBallotContract(
            address=self.address,
            winner_name=self.winner_name,
            contract_name=self.contract_name,
            latency_seconds=self.latency_seconds,
            fail_calls=self.fail_calls,
        )
        return MockDeployment(contract, fail_deploy=self.fail_deploy)


def load_deployment_fixture(path: Union[str, Path]) -> DeploymentFixture:
    """Parse a deployment fixture JSON file."""
    fixture_path = Path(path)
    with fixture_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return DeploymentFixture.model_validate(payload)


def load_deployment(path: Union[str, Path]) -> MockDeployment:
    """Build a :class:`MockDeployment` from a fixture JSON file."""
    return load_deployment_fixture(path).build()


__all__ = [
    "ContractHandle",
    "Deployment",
    "DeploymentError",
    "DeploymentFixture",
    "MockBallotContract",
    "MockDeployment",
    "load_deployment",
    "load_deployment_fixture",
]
