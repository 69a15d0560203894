# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Standalone entry point for the release goal.

Runs the release goal against a local checkout, taking the values a
delivery host would normally provide from CLI arguments or environment
variables.

References:
    - GitHub Actions Environment Variables:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/store-information-in-variables#default-environment-variables
    - GitHub Actions Outputs:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/passing-information-between-jobs#setting-an-output-parameter
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from urllib.parse import urlparse

from sdm_release.contracts import (
    DEFAULT_API_BASE,
    ExecuteGoalResult,
    GoalEvent,
    GoalInvocation,
    RemoteRepoRef,
    SdmConfiguration,
    TokenCredentials,
)
from sdm_release.github_release import github_release_creator
from sdm_release.local import LocalProjectLoader, LoggingProgressLog, StaticVersionStore
from sdm_release.release import ReleaseCreator, ReleaseCreatorArguments, execute_release
from sdm_release.version import release_like_version

logger = logging.getLogger(__name__)


@dataclass
class RunnerInputs:
    """Parsed runner inputs from CLI arguments and environment variables."""

    token: str
    repository: str
    sha: str
    version: str
    branch: str = ""
    api_url: str = DEFAULT_API_BASE
    project_dir: str = "."
    debug: bool = False
    dry_run: bool = False


def parse_inputs(args: list[str] | None = None) -> RunnerInputs:
    """Parse runner inputs from CLI arguments or environment variables.

    CLI arguments take precedence over environment variables.

    Args:
        args: Optional list of CLI arguments. If None, only environment
              variables are used.

    Returns:
        RunnerInputs with parsed values.
    """
    parser = argparse.ArgumentParser(
        description="Create a release for a goal set version",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (used as defaults when CLI args not provided):
  INPUT_TOKEN, GITHUB_TOKEN    GitHub token for authentication
  GITHUB_REPOSITORY            Repository in owner/repo format
  GITHUB_SHA                   Commit to release
  INPUT_VERSION                Version recorded for the goal set
  GITHUB_REF_NAME              Branch the goal set was planned for
  GITHUB_API_URL               API base URL (GitHub Enterprise)
  GITHUB_WORKSPACE             Project checkout directory
  INPUT_DEBUG                  Enable debug logging (true/false)
  INPUT_DRY_RUN                Dry-run mode, don't create the release (true/false)

Examples:
  sdm-release --repository owner/repo --sha abc123 --version 1.2.3-main.20190704
  sdm-release --version 1.2.3 --dry-run --debug
        """,
    )

    parser.add_argument(
        "--token",
        default=os.environ.get("INPUT_TOKEN", os.environ.get("GITHUB_TOKEN", "")),
        help="GitHub token for authentication (default: from INPUT_TOKEN or GITHUB_TOKEN env)",
    )
    parser.add_argument(
        "--repository",
        default=os.environ.get("GITHUB_REPOSITORY", ""),
        help="Repository in owner/repo format",
    )
    parser.add_argument("--sha", default=os.environ.get("GITHUB_SHA", ""), help="Commit to release")
    parser.add_argument(
        "--version",
        default=os.environ.get("INPUT_VERSION", ""),
        help="Version recorded for the goal set",
    )
    parser.add_argument("--branch", default=os.environ.get("GITHUB_REF_NAME", ""), help="Branch of the goal set")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("GITHUB_API_URL", DEFAULT_API_BASE),
        help=f"API base URL (default: {DEFAULT_API_BASE})",
    )
    parser.add_argument(
        "--project-dir",
        default=os.environ.get("GITHUB_WORKSPACE", "."),
        help="Directory holding the project checkout",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.environ.get("INPUT_DEBUG", "false").lower() == "true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=os.environ.get("INPUT_DRY_RUN", "false").lower() == "true",
        help="Dry-run mode - don't actually create the release",
    )

    parsed = parser.parse_args(args if args is not None else [])

    if parsed.repository.count("/") != 1 or not all(parsed.repository.split("/")):
        logger.error("Invalid repository '%s': must be in owner/repo format", parsed.repository)
        sys.exit(1)

    return RunnerInputs(
        token=parsed.token,
        repository=parsed.repository,
        sha=parsed.sha,
        version=parsed.version,
        branch=parsed.branch,
        api_url=parsed.api_url,
        project_dir=parsed.project_dir,
        debug=parsed.debug,
        dry_run=parsed.dry_run,
    )


def configure_logging(debug: bool) -> None:
    """Configure logging based on debug flag.

    Args:
        debug: If True, enable DEBUG level logging.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def repo_kind(api_url: str) -> str:
    """Return 'github' for the public API host and 'ghe' for anything else."""
    if urlparse(api_url).hostname == urlparse(DEFAULT_API_BASE).hostname:
        return "github"
    return "ghe"


def build_invocation(inputs: RunnerInputs) -> GoalInvocation:
    """Assemble the goal invocation a delivery host would provide."""
    owner, repo = inputs.repository.split("/")
    return GoalInvocation(
        configuration=SdmConfiguration(
            project_loader=LocalProjectLoader(inputs.project_dir),
            version_store=StaticVersionStore(inputs.version or None),
        ),
        credentials=TokenCredentials(token=inputs.token),
        id=RemoteRepoRef(owner=owner, repo=repo, kind=repo_kind(inputs.api_url), api_base=inputs.api_url),
        progress_log=LoggingProgressLog(),
        goal_event=GoalEvent(sha=inputs.sha, branch=inputs.branch or None),
    )


def dry_run_release_creator(args: ReleaseCreatorArguments) -> ExecuteGoalResult:
    """Release creator that only reports what would be released."""
    message = f"[DRY-RUN] Would create release {args.release_version} at {args.goal_event.sha[:7]}"
    args.log.write(message)
    return ExecuteGoalResult(code=0, message=message)


def set_outputs(release_version: str, result: ExecuteGoalResult) -> None:
    """Write runner outputs to the GITHUB_OUTPUT file, if set."""
    output_file = os.environ.get("GITHUB_OUTPUT", "")
    if not output_file:
        logger.debug("GITHUB_OUTPUT not set, outputs will not be written")
        return

    with open(output_file, "a") as f:
        f.write(f"release-version={release_version}\n")
        f.write(f"result-code={result.code}\n")

    logger.info("Set outputs: release-version=%s, result-code=%s", release_version, result.code)


def run(inputs: RunnerInputs) -> ExecuteGoalResult:
    """Run the release goal for the given inputs."""
    release_creator: ReleaseCreator = dry_run_release_creator if inputs.dry_run else github_release_creator
    gi = build_invocation(inputs)
    result = execute_release(release_creator)(gi)

    release_version = ""
    if result.code == 0 and inputs.version:
        release_version = release_like_version(inputs.version, gi)
    set_outputs(release_version, result)
    return result


def main(args: list[str] | None = None) -> None:
    """Main entry point for the runner."""
    inputs = parse_inputs(sys.argv[1:] if args is None else args)
    configure_logging(inputs.debug)

    if not inputs.token and not inputs.dry_run:
        logger.error("GitHub token is required. Set INPUT_TOKEN or GITHUB_TOKEN.")
        sys.exit(1)
    if not inputs.sha:
        logger.error("Commit SHA is required. Set GITHUB_SHA or pass --sha.")
        sys.exit(1)

    result = run(inputs)
    if result.code:
        logger.error("%s", result.message)
        sys.exit(1)
    logger.info("%s", result.message)


if __name__ == "__main__":  # pragma: no cover
    main()
