# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release goal and the executor that drives a release creator.

A release creator is a plain function that knows how to create a
"release", whatever that means for a project. The ``Release`` goal wraps
one or more creators as fulfillments and falls back to a no-op creator
when nothing has been registered by the time the host starts.
"""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sdm_release.contracts import (
    ExecuteGoal,
    ExecuteGoalResult,
    GoalEvent,
    GoalInvocation,
    ProgressLog,
    Project,
    ProjectLoadParams,
    PushListenerInvocation,
    PushTest,
    RemoteRepoRef,
)
from sdm_release.version import goal_invocation_version, release_like_version

if TYPE_CHECKING:
    from sdm_release.contracts import SoftwareDeliveryMachine

logger = logging.getLogger(__name__)

NOOP_RELEASE_MESSAGE = "Release goal executed"

VERSION_COMMIT_PATTERN = re.compile(r"Version: increment after .* release", re.IGNORECASE)
CHANGELOG_COMMIT_PATTERN = re.compile(r"Changelog: add release .*", re.IGNORECASE)

_goal_counter = itertools.count(1)


def generate_goal_name(prefix: str) -> str:
    """Return a process-unique goal name such as 'release-3'."""
    return f"{prefix}-{next(_goal_counter)}"


class ReleaseCreatorError(RuntimeError):
    """A release creator reported a non-zero result code."""


@dataclass(frozen=True)
class ReleaseCreatorArguments:
    """Arguments passed to a release creator."""

    credentials: Any
    goal_event: GoalEvent
    id: RemoteRepoRef
    release_version: str
    log: ProgressLog
    project: Project


ReleaseCreator = Callable[[ReleaseCreatorArguments], ExecuteGoalResult]


def noop_release_creator(args: ReleaseCreatorArguments) -> ExecuteGoalResult:
    """Release creator that does nothing and always succeeds."""
    return ExecuteGoalResult(code=0, message=NOOP_RELEASE_MESSAGE)


@dataclass(frozen=True)
class ReleaseRegistration:
    """Options for attaching a release creator to a ``Release`` goal."""

    release_creator: ReleaseCreator
    name: str | None = None
    push_test: PushTest | None = None


@dataclass(frozen=True)
class Fulfillment:
    """Named implementation attached to a goal."""

    name: str
    goal_executor: ExecuteGoal
    push_test: PushTest | None = None


@dataclass(frozen=True)
class GoalDetails:
    unique_name: str
    display_name: str = "release"
    working_description: str = "Releasing"
    completed_description: str = "Released"
    failed_description: str = "Releasing failure"


class Release:
    """Goal that creates a release for a project.

    The goal starts out unconfigured. Fulfillments may be attached with
    ``with_`` at any time before the host starts; on startup the goal
    installs a no-op fulfillment if none was attached.
    """

    def __init__(self, unique_name: str | None = None, *depends_on: Any) -> None:
        self.details = GoalDetails(unique_name=unique_name or generate_goal_name("release"))
        self.depends_on = list(depends_on)
        self.fulfillments: list[Fulfillment] = []
        self._configured = False

    @property
    def name(self) -> str:
        return self.details.unique_name

    @property
    def configured(self) -> bool:
        """True once fulfillments are attached or startup installed the default."""
        return self._configured or bool(self.fulfillments)

    def register(self, sdm: SoftwareDeliveryMachine) -> None:
        """Register the goal with the host.

        Adds a startup listener that installs the default no-op fulfillment
        when nothing else has been attached.
        """
        sdm.add_startup_listener(self._on_startup)

    def _on_startup(self) -> None:
        if self._configured:
            return
        self._configured = True
        if not self.fulfillments:
            logger.info("No release creator registered for goal '%s', using no-op", self.name)
            self.with_(
                ReleaseRegistration(
                    name=generate_goal_name("noop-release"),
                    release_creator=noop_release_creator,
                )
            )

    def with_(self, registration: ReleaseRegistration) -> Release:
        """Attach a release creator as a fulfillment of this goal.

        Args:
            registration: Release creator, optional name and optional push test.

        Returns:
            This goal, for chaining.
        """
        fulfillment = Fulfillment(
            name=registration.name or generate_goal_name("release"),
            goal_executor=execute_release(registration.release_creator),
            push_test=registration.push_test,
        )
        self.fulfillments.append(fulfillment)
        logger.debug("Added fulfillment '%s' to goal '%s'", fulfillment.name, self.name)
        return self

    def fulfillment_for(self, pi: PushListenerInvocation) -> Fulfillment | None:
        """Return the first fulfillment whose push test accepts the push."""
        for fulfillment in self.fulfillments:
            if fulfillment.push_test is None or fulfillment.push_test(pi):
                return fulfillment
        return None


def _fail(progress_log: ProgressLog, message: str) -> ExecuteGoalResult:
    logger.error(message)
    progress_log.write(message)
    return ExecuteGoalResult(code=1, message=message)


def execute_release(release_creator: ReleaseCreator) -> ExecuteGoal:
    """Return a goal executor that creates a release with ``release_creator``.

    The executor converts the version recorded for the goal set into a
    release-like version, see ``release_like_version``, before passing it
    to the release creator.

    Args:
        release_creator: Function used to create the release.

    Returns:
        Goal executor function.
    """

    def execute(gi: GoalInvocation) -> ExecuteGoalResult:
        progress_log = gi.progress_log
        project_loader = gi.configuration.project_loader
        if project_loader is None:
            return _fail(progress_log, "Invalid configuration: no projectLoader")

        params = ProjectLoadParams(credentials=gi.credentials, id=gi.id, context=gi.context, read_only=True)
        with project_loader.load(params) as project:
            return _release_project(release_creator, gi, project)

    return execute


def _release_project(release_creator: ReleaseCreator, gi: GoalInvocation, project: Project) -> ExecuteGoalResult:
    progress_log = gi.progress_log
    slug = f"{project.id.owner}/{project.id.repo}"

    version = goal_invocation_version(gi)
    if not version:
        return _fail(progress_log, "Current goal set does not have a version")

    try:
        release_version = release_like_version(version, gi)
    except ValueError as e:
        return _fail(progress_log, f"Current goal set version '{version}' is not a valid semantic version: {e}")

    progress_log.write(f"Creating release {release_version} for {slug}")
    logger.info("Creating release %s for %s", release_version, slug)
    try:
        result = release_creator(
            ReleaseCreatorArguments(
                credentials=gi.credentials,
                goal_event=gi.goal_event,
                id=gi.id,
                log=progress_log,
                project=project,
                release_version=release_version,
            )
        )
        if result.code:
            raise ReleaseCreatorError(result.message or "release creator failed")
    except Exception as e:
        return _fail(progress_log, f"Failed to create release for {slug}: {e}")

    message = f"Created release {release_version} for {slug}"
    progress_log.write(message)
    return ExecuteGoalResult(code=0, message=message)


def is_release_commit_message(message: str | None) -> bool:
    """Check if a commit message belongs to an automated release commit.

    Examples:
        >>> is_release_commit_message("Version: increment after 1.2.3 release")
        True
        >>> is_release_commit_message("changelog: add release 1.2.3")
        True
        >>> is_release_commit_message("Fix typo")
        False
    """
    if not message:
        return False
    return bool(VERSION_COMMIT_PATTERN.search(message) or CHANGELOG_COMMIT_PATTERN.search(message))


def is_release_commit(pi: PushListenerInvocation) -> bool:
    """Check if the after commit of a push is related to a release."""
    after = pi.push.after
    return is_release_commit_message(after.message if after else None)


IS_RELEASE_COMMIT = PushTest(name="IsReleaseCommit", mapping=is_release_commit)
