# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release creator for GitHub.com and GitHub Enterprise projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sdm_release.contracts import ExecuteGoalResult, is_github_repo_ref, is_token_credentials
from sdm_release.github_api import ReleaseInfo, create_release

if TYPE_CHECKING:
    from sdm_release.contracts import Project
    from sdm_release.release import ReleaseCreatorArguments

logger = logging.getLogger(__name__)

CHANGELOG_FILES = ("CHANGELOG.md", "CHANGELOG", "ChangeLog", "Changelog", "changelog")


def find_changelog(project: Project) -> str | None:
    """Return the first changelog file present in the project, if any."""
    for name in CHANGELOG_FILES:
        if project.has_file(name):
            return name
    return None


def _skip(args: ReleaseCreatorArguments, message: str) -> ExecuteGoalResult:
    logger.warning(message)
    args.log.write(message)
    return ExecuteGoalResult(code=0, message=message)


def github_release_creator(args: ReleaseCreatorArguments) -> ExecuteGoalResult:
    """Create a GitHub release for GitHub.com or GHE projects.

    If the project is not a GitHub project or the credentials do not
    carry a token, a warning is issued and success is returned.

    Args:
        args: Release creator arguments.

    Returns:
        Result with code 0 when the release was created or skipped, 1 when
        creating it failed.
    """
    slug = f"{args.id.owner}/{args.id.repo}"
    if not is_github_repo_ref(args.id):
        return _skip(args, f"Project {slug} is neither a GitHub.com nor GHE remote repository")
    if not is_token_credentials(args.credentials):
        return _skip(args, f"Project {slug} credentials are not TokenCredentials")

    try:
        changelog = find_changelog(args.project)
        create_release(
            ReleaseInfo(
                auth=args.credentials.token,
                base_url=args.id.api_base,
                owner=args.id.owner,
                repo=args.id.repo,
                version=args.release_version,
                sha=args.goal_event.sha,
                changelog=changelog,
            )
        )
    except Exception as e:
        message = f"Failed to create release {args.release_version} for project {slug}: {e}"
        logger.warning(message)
        args.log.write(message)
        return ExecuteGoalResult(code=1, message=message)

    message = f"Created release {args.release_version} for {slug}"
    args.log.write(message)
    return ExecuteGoalResult(code=0, message=message)
