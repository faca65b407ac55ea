"""Tests for GitHub organization discovery (HTTP faked via httpx.MockTransport)."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from yellowpages.config.models import DiscoverConfig
from yellowpages.infrastructure.github import GitHubDiscovery, GitHubError, resolve_token


def _repo(name: str, **kwargs: Any) -> dict[str, Any]:
    return {
        "name": name,
        "full_name": f"acme/{name}",
        "description": kwargs.pop("description", None),
        "html_url": f"https://github.com/acme/{name}",
        "topics": kwargs.pop("topics", []),
        "language": kwargs.pop("language", None),
        "fork": kwargs.pop("fork", False),
        "archived": kwargs.pop("archived", False),
    }


class FakeGitHub:
    """Serves ``/orgs/acme/repos`` in pages plus raw catalog files."""

    def __init__(self, repos: list[dict[str, Any]], files: dict[str, str] | None = None) -> None:
        self.repos = repos
        self.files = files or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/orgs/acme/repos":
            page = int(request.url.params["page"])
            per_page = int(request.url.params["per_page"])
            start = (page - 1) * per_page
            return httpx.Response(200, json=self.repos[start : start + per_page])
        if path.startswith("/repos/"):
            key = path.removeprefix("/repos/")
            if key in self.files:
                return httpx.Response(200, text=self.files[key])
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(404, json={"message": "Not Found"})


def _client(fake: FakeGitHub, **config: Any) -> GitHubDiscovery:
    return GitHubDiscovery(
        DiscoverConfig(**config), token="t0ken", transport=httpx.MockTransport(fake)
    )


class TestFetchRepos:
    def test_paginates_until_empty_page(self) -> None:
        fake = FakeGitHub([_repo(f"r{i}") for i in range(150)])
        with _client(fake) as gh:
            repos = gh.fetch_repos("acme")
        assert len(repos) == 150
        pages = [r.url.params["page"] for r in fake.requests]
        assert pages == ["1", "2", "3"]

    def test_sends_auth_and_accept_headers(self) -> None:
        fake = FakeGitHub([])
        with _client(fake) as gh:
            gh.fetch_repos("acme")
        headers = fake.requests[0].headers
        assert headers["Authorization"] == "token t0ken"
        assert headers["Accept"] == "application/vnd.github.v3+json"
        assert headers["User-Agent"] == "yellowpages-cli"

    def test_filters(self) -> None:
        fake = FakeGitHub(
            [
                _repo("keep", topics=["service"], language="Go"),
                _repo("forked", fork=True, topics=["service"], language="Go"),
                _repo("old", archived=True, topics=["service"], language="Go"),
                _repo("lib", topics=["library"], language="Go"),
                _repo("py", topics=["service"], language="Python"),
            ]
        )
        with _client(fake) as gh:
            repos = gh.fetch_repos("acme", topic="service", language="go")
        assert [r.name for r in repos] == ["keep"]

    def test_include_forks_and_archived(self) -> None:
        fake = FakeGitHub([_repo("a", fork=True), _repo("b", archived=True)])
        with _client(fake, include_forks=True, include_archived=True) as gh:
            assert len(gh.fetch_repos("acme")) == 2

    def test_error_status_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"message": "rate limited"})

        gh = GitHubDiscovery(DiscoverConfig(), transport=httpx.MockTransport(handler))
        with gh, pytest.raises(GitHubError, match="403"):
            gh.fetch_repos("acme")


class TestDiscover:
    def test_catalog_file_preferred_over_metadata(self) -> None:
        fake = FakeGitHub(
            [_repo("checkout", description="repo description"), _repo("web", topics=["frontend"])],
            files={
                "acme/checkout/contents/catalog-info.yaml": (
                    "metadata:\n  name: checkout-api\n  description: from descriptor\n"
                )
            },
        )
        with _client(fake) as gh:
            found = gh.discover("acme")

        by_name = {d.name: d for d in found}
        assert by_name["checkout-api"].source == "catalog-file"
        assert by_name["checkout-api"].repo == "https://github.com/acme/checkout"
        assert by_name["checkout-api"].source_path == "github:acme/checkout"
        assert by_name["web"].source == "inferred"
        assert by_name["web"].tags == ["frontend"]

    def test_raw_accept_header_for_contents(self) -> None:
        fake = FakeGitHub([_repo("x")])
        with _client(fake) as gh:
            gh.discover("acme")
        contents = [r for r in fake.requests if "/contents/" in r.url.path]
        assert contents
        assert all(r.headers["Accept"] == "application/vnd.github.v3.raw" for r in contents)


class TestResolveToken:
    def test_first_configured_env_var_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GH_TOKEN", "second")
        assert resolve_token(DiscoverConfig()) == "second"
        monkeypatch.setenv("GITHUB_TOKEN", "first")
        assert resolve_token(DiscoverConfig()) == "first"

    def test_none_when_unset(self) -> None:
        assert resolve_token(DiscoverConfig()) is None
