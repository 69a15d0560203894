# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release version policy.

Turns the version the host computed for a goal set into the version a
release is published under. The host builds goal-set versions by appending
the branch and a timestamp to the project version as pre-release identifiers
(e.g. '1.2.3-main.20190704123456'). Those identifiers, and any build
metadata, never belong in a release.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
    - python-semver: https://python-semver.readthedocs.io/
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import semver

if TYPE_CHECKING:
    from sdm_release.contracts import GoalInvocation

logger = logging.getLogger(__name__)

# Timestamp identifier the host appends to goal-set versions (YYYYMMDDHHmmss)
TIMESTAMP_PATTERN = re.compile(r"^\d{14}$")

# Characters not allowed in a SemVer identifier
INVALID_IDENTIFIER_CHARS = re.compile(r"[^0-9A-Za-z-]+")


def branch_identifier(branch: str) -> str:
    """Render a branch name the way it appears in a pre-release identifier.

    Examples:
        >>> branch_identifier("feature/login")
        'feature-login'
    """
    return INVALID_IDENTIFIER_CHARS.sub("-", branch)


def strip_host_identifiers(prerelease: str, branch: str | None) -> list[str]:
    """Remove the host's branch and timestamp identifiers from a pre-release.

    The timestamp is always the last identifier. The identifier before it is
    the branch; it is dropped when it matches the goal event's branch, or when
    the branch is unknown.

    Returns:
        The remaining pre-release identifiers, possibly empty.
    """
    identifiers = prerelease.split(".")
    if not TIMESTAMP_PATTERN.match(identifiers[-1]):
        return identifiers
    identifiers.pop()
    if identifiers and (not branch or identifiers[-1] == branch_identifier(branch)):
        identifiers.pop()
    return identifiers


def release_like_version(version: str, gi: GoalInvocation) -> str:
    """Convert a goal-set version into a release-like version.

    Args:
        version: Version recorded for the goal set (e.g., '1.2.3-main.20190704123456').
        gi: Goal invocation the release is created for.

    Returns:
        The version unchanged when it has no pre-release component. Otherwise
        the version with the host's branch and timestamp identifiers and any
        build metadata removed. A pre-release the project declared itself,
        such as 'M.1' or 'rc.2', is kept.

    Raises:
        ValueError: If the version is not a valid semantic version.

    Examples:
        >>> release_like_version("1.2.3", gi)
        '1.2.3'
        >>> release_like_version("1.2.3-feature.20190704123456+abc", gi)  # on feature
        '1.2.3'
        >>> release_like_version("1.0.0-M.1", gi)
        '1.0.0-M.1'
    """
    parsed = semver.Version.parse(version)
    if not parsed.prerelease:
        return version

    remaining = strip_host_identifiers(parsed.prerelease, gi.goal_event.branch)
    release = parsed.replace(prerelease=".".join(remaining) or None, build=None)

    logger.debug("Release-like version of '%s' is '%s'", version, release)
    return str(release)


def goal_invocation_version(gi: GoalInvocation) -> str | None:
    """Read the version the host recorded for the current goal set.

    Returns:
        The recorded version, or None if there is no version store or the
        goal set has no version.
    """
    store = gi.configuration.version_store
    if store is None:
        logger.debug("No version store configured")
        return None
    return store.read(gi.goal_event) or None
