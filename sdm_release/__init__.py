# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release goal for software delivery machines - Core modules."""

from sdm_release.contracts import ExecuteGoalResult, RemoteRepoRef, TokenCredentials
from sdm_release.github_release import github_release_creator
from sdm_release.release import (
    IS_RELEASE_COMMIT,
    Release,
    ReleaseCreatorArguments,
    ReleaseRegistration,
    execute_release,
)
from sdm_release.version import release_like_version

__all__ = [
    "IS_RELEASE_COMMIT",
    "ExecuteGoalResult",
    "Release",
    "ReleaseCreatorArguments",
    "ReleaseRegistration",
    "RemoteRepoRef",
    "TokenCredentials",
    "execute_release",
    "github_release_creator",
    "release_like_version",
]
