# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Unit tests for github_release.py - GitHub release creator."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from github.GithubException import GithubException

from sdm_release.contracts import GoalEvent, RemoteRepoRef, TokenCredentials
from sdm_release.github_api import ReleaseInfo
from sdm_release.github_release import CHANGELOG_FILES, find_changelog, github_release_creator
from sdm_release.release import ReleaseCreatorArguments
from tests.conftest import FakeLog, FakeProject

SHA = "4455434b574f5254482e"


def make_args(
    repo_ref: RemoteRepoRef,
    credentials: object = None,
    files: set[str] | None = None,
    version: str = "2.0.17",
) -> ReleaseCreatorArguments:
    """Build release creator arguments for the KendrickLamar/DAMN. project."""
    return ReleaseCreatorArguments(
        credentials=TokenCredentials(token="XXX") if credentials is None else credentials,
        goal_event=GoalEvent(sha=SHA),
        id=repo_ref,
        release_version=version,
        log=FakeLog(),
        project=FakeProject(id=repo_ref, files=files or set()),
    )


@pytest.fixture
def mock_create_release():
    """Patch the release-creation call used by the creator."""
    with patch("sdm_release.github_release.create_release") as mock:
        yield mock


class TestNotGitHubRepository:
    """Projects not hosted on GitHub are skipped successfully."""

    def test_skips_when_not_remote_repo(self, mock_create_release: MagicMock) -> None:
        """A reference without a kind is not a GitHub repository."""
        repo_ref = SimpleNamespace(owner="KendrickLamar", repo="DAMN.")
        args = make_args(repo_ref)

        result = github_release_creator(args)

        assert result.code == 0
        assert result.message == "Project KendrickLamar/DAMN. is neither a GitHub.com nor GHE remote repository"
        mock_create_release.assert_not_called()

    def test_skips_bitbucket_repo(self, mock_create_release: MagicMock) -> None:
        """A Bitbucket Server reference is skipped even with a token."""
        repo_ref = RemoteRepoRef(owner="KendrickLamar", repo="DAMN.", kind="bitbucketserver")
        args = make_args(repo_ref)

        result = github_release_creator(args)

        assert result.code == 0
        assert result.message == "Project KendrickLamar/DAMN. is neither a GitHub.com nor GHE remote repository"
        assert args.log.lines == [result.message]
        mock_create_release.assert_not_called()


class TestCredentials:
    """Projects without token credentials are skipped successfully."""

    def test_skips_without_token(self, github_repo_ref: RemoteRepoRef, mock_create_release: MagicMock) -> None:
        """Credentials without a token do not create a release."""
        args = make_args(github_repo_ref, credentials=SimpleNamespace())

        result = github_release_creator(args)

        assert result.code == 0
        assert result.message == "Project KendrickLamar/DAMN. credentials are not TokenCredentials"
        mock_create_release.assert_not_called()

    def test_skips_with_empty_token(self, github_repo_ref: RemoteRepoRef, mock_create_release: MagicMock) -> None:
        """An empty token counts as no token."""
        args = make_args(github_repo_ref, credentials=TokenCredentials(token=""))

        result = github_release_creator(args)

        assert result.code == 0
        mock_create_release.assert_not_called()


class TestCreateRelease:
    """Tests for releases that are actually created."""

    def test_creates_release_without_changelog(
        self, github_repo_ref: RemoteRepoRef, mock_create_release: MagicMock
    ) -> None:
        """Release info carries the input values and no changelog."""
        args = make_args(github_repo_ref)

        result = github_release_creator(args)

        assert result.code == 0
        assert result.message == "Created release 2.0.17 for KendrickLamar/DAMN."
        mock_create_release.assert_called_once_with(
            ReleaseInfo(
                auth="XXX",
                base_url="https://api.github.com",
                owner="KendrickLamar",
                repo="DAMN.",
                version="2.0.17",
                sha=SHA,
                changelog=None,
            )
        )

    def test_creates_release_with_changelog(
        self, github_repo_ref: RemoteRepoRef, mock_create_release: MagicMock
    ) -> None:
        """A CHANGELOG.md in the project is passed along."""
        args = make_args(github_repo_ref, files={"CHANGELOG.md"})

        result = github_release_creator(args)

        assert result.code == 0
        assert result.message == "Created release 2.0.17 for KendrickLamar/DAMN."
        info = mock_create_release.call_args.args[0]
        assert info.changelog == "CHANGELOG.md"

    def test_ghe_uses_repo_api_base(self, mock_create_release: MagicMock) -> None:
        """GitHub Enterprise releases go to the enterprise API."""
        repo_ref = RemoteRepoRef(
            owner="KendrickLamar", repo="DAMN.", kind="ghe", api_base="https://ghe.example.com/api/v3"
        )
        args = make_args(repo_ref)

        result = github_release_creator(args)

        assert result.code == 0
        assert mock_create_release.call_args.args[0].base_url == "https://ghe.example.com/api/v3"

    def test_failure_returns_error_result(
        self, github_repo_ref: RemoteRepoRef, mock_create_release: MagicMock
    ) -> None:
        """Errors from the API are reported, not raised."""
        mock_create_release.side_effect = GithubException(422, "Validation Failed", None)
        args = make_args(github_repo_ref)

        result = github_release_creator(args)

        assert result.code == 1
        assert result.message.startswith("Failed to create release 2.0.17 for project KendrickLamar/DAMN.: ")
        assert "Validation Failed" in result.message
        assert args.log.lines == [result.message]


class TestFindChangelog:
    """Tests for changelog discovery."""

    def test_no_changelog(self, github_repo_ref: RemoteRepoRef) -> None:
        """No candidate file yields None."""
        assert find_changelog(FakeProject(id=github_repo_ref, files={"README.md"})) is None

    @pytest.mark.parametrize("name", CHANGELOG_FILES)
    def test_each_candidate_is_found(self, github_repo_ref: RemoteRepoRef, name: str) -> None:
        """Every candidate name is recognized."""
        assert find_changelog(FakeProject(id=github_repo_ref, files={name})) == name

    def test_first_candidate_wins(self, github_repo_ref: RemoteRepoRef) -> None:
        """CHANGELOG.md is preferred over later candidates."""
        project = FakeProject(id=github_repo_ref, files={"changelog", "CHANGELOG", "CHANGELOG.md"})
        assert find_changelog(project) == "CHANGELOG.md"
