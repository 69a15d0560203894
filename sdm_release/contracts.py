# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Types exchanged between the delivery host and the release goal.

The host owns scheduling, credentials, project loading and the version
recorded for each goal set. These definitions describe the shape of what
it hands to a goal executor and what it expects back.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol

DEFAULT_API_BASE = "https://api.github.com"

# Repository kinds hosted by GitHub.com and GitHub Enterprise
GITHUB_KINDS = ("github", "ghe")


@dataclass(frozen=True)
class ExecuteGoalResult:
    """Outcome of a goal execution. A code of 0 means success."""

    code: int = 0
    message: str | None = None


@dataclass(frozen=True)
class TokenCredentials:
    """Credentials carrying a bearer token."""

    token: str


@dataclass(frozen=True)
class RemoteRepoRef:
    """Reference to a remote repository."""

    owner: str
    repo: str
    kind: str | None = None
    api_base: str = DEFAULT_API_BASE


@dataclass(frozen=True)
class GoalEvent:
    """The goal event that triggered this execution."""

    sha: str
    branch: str | None = None


@dataclass(frozen=True)
class Commit:
    sha: str
    message: str | None = None


@dataclass(frozen=True)
class Push:
    after: Commit | None = None


@dataclass(frozen=True)
class PushListenerInvocation:
    push: Push


@dataclass(frozen=True)
class PushTest:
    """Named predicate the host uses to decide whether a goal applies to a push."""

    name: str
    mapping: Callable[[PushListenerInvocation], bool]

    def __call__(self, pi: PushListenerInvocation) -> bool:
        return self.mapping(pi)


class ProgressLog(Protocol):
    def write(self, message: str) -> None: ...


class Project(Protocol):
    """Checked-out project as seen by a goal."""

    @property
    def id(self) -> RemoteRepoRef: ...

    def has_file(self, path: str) -> bool: ...


@dataclass(frozen=True)
class ProjectLoadParams:
    credentials: Any
    id: RemoteRepoRef
    context: Any = None
    read_only: bool = True


class ProjectLoader(Protocol):
    """Loads a project for the duration of a ``with`` block."""

    def load(self, params: ProjectLoadParams) -> AbstractContextManager[Project]: ...


class VersionStore(Protocol):
    """Lookup of the version recorded for a goal set."""

    def read(self, goal_event: GoalEvent) -> str | None: ...


class SoftwareDeliveryMachine(Protocol):
    def add_startup_listener(self, listener: Callable[[], None]) -> None: ...


@dataclass
class SdmConfiguration:
    """Host capabilities available to goal executors."""

    project_loader: ProjectLoader | None = None
    version_store: VersionStore | None = None


@dataclass(frozen=True)
class GoalInvocation:
    """Everything the host passes to a goal executor."""

    configuration: SdmConfiguration
    credentials: Any
    id: RemoteRepoRef
    progress_log: ProgressLog
    goal_event: GoalEvent
    context: Any = None


ExecuteGoal = Callable[[GoalInvocation], ExecuteGoalResult]


def is_github_repo_ref(repo_ref: Any) -> bool:
    """Check whether a repository reference points at GitHub.com or GHE.

    Args:
        repo_ref: Repository reference supplied by the host.

    Returns:
        True if the reference kind is 'github' or 'ghe', False otherwise.
    """
    return getattr(repo_ref, "kind", None) in GITHUB_KINDS


def is_token_credentials(credentials: Any) -> bool:
    """Check whether credentials carry a non-empty bearer token."""
    return bool(getattr(credentials, "token", None))
