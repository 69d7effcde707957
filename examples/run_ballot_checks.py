"""Example run of the ballot checks against an in-memory deployment."""

from __future__ import annotations

from pathlib import Path
from pprint import pprint
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ballot_verifier.deployment import MockBallotContract, MockDeployment
from ballot_verifier.encoding import encode_bytes32
from ballot_verifier.harness import VerificationHarness


def main() -> None:
    contract = MockBallotContract(
        address="0x5FbDB2315678afecb367f032d93F642f64180aa3",
        winner_name=encode_bytes32("Manolo"),
    )
    harness = VerificationHarness(
        deployment=MockDeployment(contract),
        log_path=REPO_ROOT / "artifacts" / "example_contract_checks.jsonl",
    )
    result = harness.run()

    for log in result.logs:
        pprint(
            {
                "case_id": log.case_id,
                "status": log.status,
                "message": log.message,
                "details": log.details,
            }
        )

    print(f"Passed {result.passed_count}/{result.total} cases.")


if __name__ == "__main__":
    main()
