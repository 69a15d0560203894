# Copyright (c) 2026 Mark Ferrell. MIT License.
"""GitHub API wrapper for tag and release operations.

References:
    - GitHub REST API: https://docs.github.com/en/rest
    - PyGithub Documentation: https://pygithub.readthedocs.io/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from github import Auth, Github
from github.GithubException import GithubException

from sdm_release.contracts import DEFAULT_API_BASE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseInfo:
    """Everything needed to create a release on GitHub."""

    auth: str
    base_url: str
    owner: str
    repo: str
    version: str
    sha: str
    changelog: str | None = None


class GitHubAPI:
    """Wrapper around PyGithub for tag and release operations.

    References:
        - Authentication: https://docs.github.com/en/rest/authentication
    """

    def __init__(self, token: str, repository: str, base_url: str = DEFAULT_API_BASE) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub token for authentication.
            repository: Repository in 'owner/repo' format.
            base_url: API base URL, differs from the default for GitHub Enterprise.

        References:
            - Get a repository: https://docs.github.com/en/rest/repos/repos#get-a-repository
        """
        if not token:
            raise ValueError("GitHub token is required.")
        if not repository:
            raise ValueError("Repository is required.")

        self._github = Github(auth=Auth.Token(token), base_url=base_url or DEFAULT_API_BASE)
        self._repo = self._github.get_repo(repository)

    @property
    def html_url(self) -> str:
        """Web URL of the repository."""
        return self._repo.html_url

    def create_tag(
        self,
        tag_name: str,
        commit_sha: str,
        message: str = "",
    ) -> None:
        """Create an annotated tag pointing to a commit.

        Args:
            tag_name: Name of the tag to create (e.g., '1.2.0').
            commit_sha: SHA of the commit to tag.
            message: Tag annotation message.

        Raises:
            GithubException: If tag creation fails.

        References:
            - Create a tag object: https://docs.github.com/en/rest/git/tags#create-a-tag-object
            - Create a reference: https://docs.github.com/en/rest/git/refs#create-a-reference
        """
        tag_object = self._repo.create_git_tag(
            tag=tag_name,
            message=message or f"Release {tag_name}",
            object=commit_sha,
            type="commit",
        )
        self._repo.create_git_ref(
            ref=f"refs/tags/{tag_name}",
            sha=tag_object.sha,
        )

    def get_tag_commit_sha(self, tag_name: str) -> str | None:
        """Get the commit SHA that a tag points to.

        Args:
            tag_name: Name of the tag.

        Returns:
            Commit SHA string, or None if tag doesn't exist.

        References:
            - Get a reference: https://docs.github.com/en/rest/git/refs#get-a-reference
            - Get a tag: https://docs.github.com/en/rest/git/tags#get-a-tag
        """
        try:
            ref = self._repo.get_git_ref(f"tags/{tag_name}")
            tag_sha = ref.object.sha
            # Annotated tags point at a tag object, not the commit
            if ref.object.type == "tag":
                tag_obj = self._repo.get_git_tag(tag_sha)
                return tag_obj.object.sha
            return tag_sha
        except GithubException:
            return None

    def create_release(
        self,
        tag_name: str,
        name: str,
        body: str = "",
        prerelease: bool = False,
    ) -> str:
        """Create a release for an existing tag.

        Returns:
            URL of the created release.

        Raises:
            GithubException: If release creation fails.

        References:
            - Create a release: https://docs.github.com/en/rest/releases/releases#create-a-release
        """
        release = self._repo.create_git_release(
            tag=tag_name,
            name=name,
            message=body,
            prerelease=prerelease,
        )
        return release.html_url


def release_name(version: str) -> str:
    """Display name of the release for a version."""
    return version


def release_body(html_url: str, version: str, changelog: str | None) -> str:
    """Release body linking to the changelog at the release tag, if there is one."""
    if not changelog:
        return ""
    return f"[Changelog]({html_url}/blob/{version}/{changelog})"


def create_release(info: ReleaseInfo) -> None:
    """Tag the commit and create a GitHub release for it.

    An existing tag is reused when it already points at the release commit.

    Raises:
        ValueError: If the tag exists and points at a different commit.
        GithubException: If any API call fails.
    """
    api = GitHubAPI(token=info.auth, repository=f"{info.owner}/{info.repo}", base_url=info.base_url)

    existing_sha = api.get_tag_commit_sha(info.version)
    if existing_sha is None:
        api.create_tag(info.version, info.sha, f"Release {info.version}")
        logger.info("Created tag '%s' at %s", info.version, info.sha[:7])
    elif existing_sha != info.sha:
        raise ValueError(f"Tag {info.version} already exists at {existing_sha[:7]}, not {info.sha[:7]}")
    else:
        logger.info("Tag '%s' already exists at %s", info.version, info.sha[:7])

    url = api.create_release(
        tag_name=info.version,
        name=release_name(info.version),
        body=release_body(api.html_url, info.version, info.changelog),
        prerelease="-" in info.version,
    )
    logger.info("Created release %s: %s", info.version, url)
