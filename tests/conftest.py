"""Shared pytest fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import pytest

from sdm_release.contracts import (
    GoalEvent,
    GoalInvocation,
    ProjectLoadParams,
    RemoteRepoRef,
    SdmConfiguration,
    TokenCredentials,
)
from sdm_release.local import StaticVersionStore


@dataclass
class FakeLog:
    """Progress log that records what was written."""

    lines: list[str] = field(default_factory=list)

    def write(self, message: str) -> None:
        self.lines.append(message)


@dataclass
class FakeProject:
    """In-memory project holding a set of file paths."""

    id: RemoteRepoRef
    files: set[str] = field(default_factory=set)

    def has_file(self, path: str) -> bool:
        return path in self.files


class FakeProjectLoader:
    """Project loader recording every load and whether it was released."""

    def __init__(self, files: set[str] | None = None) -> None:
        self.files = files or set()
        self.loads: list[ProjectLoadParams] = []
        self.released = 0

    @contextmanager
    def load(self, params: ProjectLoadParams) -> Iterator[FakeProject]:
        self.loads.append(params)
        try:
            yield FakeProject(id=params.id, files=self.files)
        finally:
            self.released += 1


class FakeSdm:
    """Delivery host stand-in that collects startup listeners."""

    def __init__(self) -> None:
        self.listeners: list[Callable[[], None]] = []

    def add_startup_listener(self, listener: Callable[[], None]) -> None:
        self.listeners.append(listener)

    def start(self) -> None:
        for listener in self.listeners:
            listener()


@pytest.fixture
def github_repo_ref() -> RemoteRepoRef:
    """GitHub.com repository reference."""
    return RemoteRepoRef(owner="KendrickLamar", repo="DAMN.", kind="github", api_base="https://api.github.com")


@pytest.fixture
def progress_log() -> FakeLog:
    return FakeLog()


@pytest.fixture
def project_loader() -> FakeProjectLoader:
    return FakeProjectLoader()


@pytest.fixture
def make_invocation(
    github_repo_ref: RemoteRepoRef,
    progress_log: FakeLog,
    project_loader: FakeProjectLoader,
) -> Callable[..., GoalInvocation]:
    """Factory for goal invocations with sensible defaults."""

    def _make(
        version: str | None = "2.0.17",
        branch: str | None = "main",
        loader: Any = project_loader,
        credentials: Any = None,
    ) -> GoalInvocation:
        return GoalInvocation(
            configuration=SdmConfiguration(project_loader=loader, version_store=StaticVersionStore(version)),
            credentials=credentials or TokenCredentials(token="XXX"),
            id=github_repo_ref,
            progress_log=progress_log,
            goal_event=GoalEvent(sha="4455434b574f5254482e", branch=branch),
        )

    return _make
