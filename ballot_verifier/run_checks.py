"""CLI for verifying a deployed ballot contract.

Usage:
    python -m ballot_verifier.run_checks \\
        --deployment examples/ballot_deployment.json \\
        --output artifacts/contract_checks.jsonl

Settings not given on the command line come from BALLOT_* environment
variables (a local .env file is honoured).
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .cases import ballot_suite
from .config import HarnessConfig
from .deployment import load_deployment
from .encoding import list_decoders
from .harness import VerificationHarness
from .verifier import ContractVerifier


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify a deployed ballot smart contract")
    parser.add_argument(
        "--deployment",
        type=str,
        required=True,
        help="Path to a deployment fixture JSON file (address, winner_name, ...)",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output path for JSONL log file (default: BALLOT_LOG_PATH or artifacts/contract_checks.jsonl)",
    )
    parser.add_argument(
        "--expected-winner",
        type=str,
        help="Expected raw winnerName() value as hex (default: bytes32 'Manolo')",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds allowed per call to the deployment (default: 10)",
    )
    parser.add_argument(
        "--decoder",
        type=str,
        choices=list(list_decoders()),
        help="Decoder used to display winnerName() (default: ascii)",
    )
    parser.add_argument(
        "--per-case-handle",
        action="store_true",
        help="Acquire a fresh contract handle for each case instead of once per run",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = HarnessConfig.from_env()
        overrides = {}
        if args.output:
            overrides["log_path"] = Path(args.output)
        if args.expected_winner:
            overrides["expected_winner"] = args.expected_winner
        if args.timeout is not None:
            overrides["call_timeout"] = args.timeout
        if args.decoder:
            overrides["decoder"] = args.decoder
        if args.per_case_handle:
            overrides["share_handle"] = False
        config = replace(config, **overrides)
    except ValueError as exc:
        print(f"Error: Invalid configuration: {exc}")
        return 2

    deployment_path = Path(args.deployment)
    if not deployment_path.is_file():
        print(f"Error: Deployment fixture not found: {deployment_path}")
        return 2
    try:
        deployment = load_deployment(deployment_path)
    except (OSError, ValidationError, ValueError) as exc:
        print(f"Error: Invalid deployment fixture {deployment_path}: {exc}")
        return 2

    verifier = ContractVerifier(
        timeout=config.call_timeout,
        address_pattern=config.address_pattern,
        decoder=config.decoder,
    )
    harness = VerificationHarness(
        deployment=deployment,
        log_path=config.log_path,
        suite=ballot_suite(config.expected_winner),
        verifier=verifier,
        share_handle=config.share_handle,
    )

    print(f"Verifying deployment from {deployment_path}...")
    print(f"  Cases: {len(harness.suite)}")
    print(f"  Timeout: {config.call_timeout:g}s")
    print(f"  Shared handle: {'yes' if config.share_handle else 'no'}")
    print(f"  Output: {config.log_path}")
    print()

    result = harness.run()

    print("=" * 80)
    print("CONTRACT VERIFICATION RESULTS")
    print("=" * 80)
    print(f"\nTotal cases: {result.total}")
    print(f"Passed: {result.passed_count}")
    print(f"Assertion failures: {result.failed_count}")
    print(f"Deployment errors: {result.error_count}")
    print(f"\nLog file: {config.log_path}")

    failed_logs = [log for log in result.logs if not log.passed]
    if failed_logs:
        print(f"\nFailures ({len(failed_logs)}):")
        for log in failed_logs:
            print(f"  - {log.case_id} [{log.status}]: {log.message}")

    return 0 if result.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
