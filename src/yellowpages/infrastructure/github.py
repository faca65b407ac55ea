"""GitHub organization discovery over the REST API (httpx).

Lists an organization's repositories page by page, filters them, and
turns each into a :class:`DiscoveredService`, preferring a catalog
descriptor committed to the repo over metadata inference.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from yellowpages.config.models import DiscoverConfig
from yellowpages.domain.catalog_file import CATALOG_FILENAMES, DiscoveredService, parse_catalog_file

logger = logging.getLogger(__name__)

PER_PAGE = 100
USER_AGENT = "yellowpages-cli"


class GitHubError(Exception):
    """The GitHub API returned an error response or could not be reached."""


@dataclass(frozen=True)
class GitHubRepo:
    name: str
    full_name: str
    description: str | None
    html_url: str
    topics: tuple[str, ...] = ()
    language: str | None = None
    fork: bool = False
    archived: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> GitHubRepo:
        return cls(
            name=str(data["name"]),
            full_name=str(data["full_name"]),
            description=data.get("description"),
            html_url=str(data.get("html_url", "")),
            topics=tuple(data.get("topics") or ()),
            language=data.get("language"),
            fork=bool(data.get("fork", False)),
            archived=bool(data.get("archived", False)),
        )


def resolve_token(config: DiscoverConfig) -> str | None:
    """First non-empty token among the configured env vars."""
    for var in config.token_env_vars:
        value = os.environ.get(var)
        if value:
            return value
    return None


class GitHubDiscovery:
    """Read-only client for organization repository discovery."""

    def __init__(
        self,
        config: DiscoverConfig | None = None,
        *,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or DiscoverConfig()
        headers = {"Accept": "application/vnd.github.v3+json", "User-Agent": USER_AGENT}
        token = token or resolve_token(self._config)
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = httpx.Client(
            base_url=self._config.api_url,
            headers=headers,
            timeout=self._config.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubDiscovery:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def fetch_repos(
        self,
        org: str,
        *,
        topic: str | None = None,
        language: str | None = None,
    ) -> list[GitHubRepo]:
        """List *org*'s repositories, following pages until one comes back empty."""
        repos: list[GitHubRepo] = []
        page = 1
        while True:
            try:
                resp = self._client.get(
                    f"/orgs/{org}/repos", params={"per_page": PER_PAGE, "page": page}
                )
            except httpx.HTTPError as exc:
                raise GitHubError(f"GitHub API request failed: {exc}") from exc
            if resp.is_error:
                raise GitHubError(f"GitHub API error: {resp.status_code} {resp.reason_phrase}")
            batch = resp.json()
            if not batch:
                break
            repos.extend(GitHubRepo.from_api(item) for item in batch)
            page += 1
        logger.debug("Fetched %d repos for org %s", len(repos), org)

        cfg = self._config
        lang = language.lower() if language else None
        return [
            r
            for r in repos
            if (cfg.include_forks or not r.fork)
            and (cfg.include_archived or not r.archived)
            and (topic is None or topic in r.topics)
            and (lang is None or (r.language or "").lower() == lang)
        ]

    def fetch_catalog_file(self, repo: GitHubRepo) -> str | None:
        """Return the raw text of the first catalog descriptor in *repo*."""
        for filename in CATALOG_FILENAMES:
            try:
                resp = self._client.get(
                    f"/repos/{repo.full_name}/contents/{filename}",
                    headers={"Accept": "application/vnd.github.v3.raw"},
                )
            except httpx.HTTPError:
                logger.debug("Fetching %s from %s failed", filename, repo.full_name, exc_info=True)
                continue
            if resp.is_success:
                return resp.text
        return None

    def discover(
        self,
        org: str,
        *,
        topic: str | None = None,
        language: str | None = None,
    ) -> list[DiscoveredService]:
        results: list[DiscoveredService] = []
        for repo in self.fetch_repos(org, topic=topic, language=language):
            source_path = f"github:{repo.full_name}"
            content = self.fetch_catalog_file(repo)
            if content is not None:
                parsed = parse_catalog_file(content, source_path)
                if parsed is not None:
                    if parsed.repo is None:
                        parsed = parsed.model_copy(update={"repo": repo.html_url})
                    results.append(parsed)
                    continue

            results.append(
                DiscoveredService(
                    name=repo.name,
                    description=repo.description,
                    repo=repo.html_url,
                    tags=list(repo.topics) or None,
                    source="inferred",
                    source_path=source_path,
                )
            )
        return results
