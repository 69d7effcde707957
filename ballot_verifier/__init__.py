"""Verification harness for a deployed ballot smart contract."""

from .cases import BALLOT_WINNER_HEX, CaseSuite, ContractCase, ballot_cases, ballot_suite  # noqa: F401
from .deployment import (  # noqa: F401
    ContractHandle,
    Deployment,
    DeploymentError,
    MockBallotContract,
    MockDeployment,
    load_deployment,
)
from .harness import HarnessResult, VerificationHarness  # noqa: F401
from .verifier import CheckResult, ContractVerifier, ValueMismatchError  # noqa: F401
