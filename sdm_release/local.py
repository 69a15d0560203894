# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Host capabilities backed by the local filesystem.

Used to run the release goal outside a delivery host, e.g. from a CI job
that already has the repository checked out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sdm_release.contracts import GoalEvent, ProjectLoadParams, RemoteRepoRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalProject:
    """Project checked out in a local directory."""

    base_dir: Path
    id: RemoteRepoRef

    def has_file(self, path: str) -> bool:
        return (self.base_dir / path).is_file()


class LocalProjectLoader:
    """Loads projects from an existing checkout."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)

    @contextmanager
    def load(self, params: ProjectLoadParams) -> Iterator[LocalProject]:
        if not self.base_dir.is_dir():
            raise FileNotFoundError(f"Project directory '{self.base_dir}' does not exist")
        logger.debug("Loading %s/%s from %s", params.id.owner, params.id.repo, self.base_dir)
        yield LocalProject(base_dir=self.base_dir, id=params.id)


@dataclass(frozen=True)
class StaticVersionStore:
    """Version store that knows a single version for every goal set."""

    version: str | None

    def read(self, goal_event: GoalEvent) -> str | None:
        return self.version


@dataclass
class LoggingProgressLog:
    """Progress log that forwards lines to ``logging`` and keeps them."""

    name: str = "sdm_release.progress"
    lines: list[str] = field(default_factory=list)

    def write(self, message: str) -> None:
        self.lines.append(message)
        logging.getLogger(self.name).info(message)
