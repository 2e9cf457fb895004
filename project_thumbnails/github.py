"""
GitHub helpers.

  parse_repo_link     — "https://github.com/owner/repo" → ("owner", "repo")
  repo_preview_url    — GitHub's OpenGraph social-preview image for a repo (URL template, no fetch)
  fetch_public_repos  — list a user's public, non-fork repositories via the REST API
  repo_to_project     — REST repo dict → ProjectDescriptor, ready for the thumbnail pipeline
"""

from __future__ import annotations

import json
import logging
import re
import urllib.parse
import urllib.request
from typing import Dict, List, Optional, Tuple

from .errors import MalformedRepoLinkError
from .models import ProjectDescriptor

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
OPENGRAPH_URL = "https://opengraph.githubassets.com/1/{owner}/{repo}"
PER_PAGE = 100


def parse_repo_link(link: str) -> Tuple[str, str]:
    """
    Extract (owner, repo) from a repository URL.

    The path must hold exactly two non-empty segments; a trailing slash and a
    ".git" suffix are tolerated. Raises MalformedRepoLinkError otherwise.
    """
    try:
        url = urllib.parse.urlsplit(link.strip())
    except ValueError as e:
        raise MalformedRepoLinkError(link, f"Invalid GitHub URL: {e}") from e

    if url.scheme not in ("http", "https") or not url.netloc:
        raise MalformedRepoLinkError(link)

    segments = [s for s in url.path.split("/") if s]
    if len(segments) != 2:
        raise MalformedRepoLinkError(
            link, f"Invalid GitHub URL format: expected /owner/repo, got {url.path!r}"
        )
    owner, repo = segments
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise MalformedRepoLinkError(link)
    return owner, repo


def repo_preview_url(owner: str, repo: str) -> str:
    return OPENGRAPH_URL.format(
        owner=urllib.parse.quote(owner, safe=""),
        repo=urllib.parse.quote(repo, safe=""),
    )


def format_repo_name(name: str) -> str:
    """"my-cool_project" → "My Cool Project"."""
    spaced = re.sub(r"[-_]", " ", name)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def repo_to_project(repo: Dict) -> ProjectDescriptor:
    language = repo.get("language")
    languages = repo.get("languages") or ([language] if language else [])
    return ProjectDescriptor(
        title=format_repo_name(repo["name"]),
        description=repo.get("description") or f"A {language or 'software'} project",
        technologies=list(languages),
        github_link=repo.get("html_url"),
    )


# ── REST API ──────────────────────────────────────────────────────────────────

def _get_json(path: str, token: Optional[str], timeout: int):
    req = urllib.request.Request(
        f"{GITHUB_API_URL}{path}",
        headers={
            "Accept": "application/vnd.github+json",
            "User-Agent": "project-thumbnails/1.0",
            **({"Authorization": f"Bearer {token}"} if token else {}),
        },
    )
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return json.loads(resp.read().decode("utf-8"))


def fetch_public_repos(
    username: str,
    token: Optional[str] = None,
    timeout: int = 15,
    with_languages: bool = True,
) -> List[Dict]:
    """
    All public, non-fork repositories owned by `username`, most recently updated first.

    Each dict is the REST payload plus a "languages" list (from the
    per-repo languages endpoint, falling back to the primary language).
    HTTP errors on the listing itself propagate.
    """
    repos: List[Dict] = []
    page = 1
    while True:
        query = urllib.parse.urlencode({
            "type": "owner",
            "sort": "updated",
            "direction": "desc",
            "per_page": PER_PAGE,
            "page": page,
        })
        batch = _get_json(f"/users/{urllib.parse.quote(username)}/repos?{query}", token, timeout)
        if not batch:
            break

        for repo in batch:
            if repo.get("fork") or repo.get("private"):
                continue
            repo = dict(repo)
            primary = repo.get("language")
            repo["languages"] = [primary] if primary else []
            if with_languages:
                try:
                    langs = _get_json(
                        f"/repos/{urllib.parse.quote(username)}/{urllib.parse.quote(repo['name'])}/languages",
                        token,
                        timeout,
                    )
                    if langs:
                        repo["languages"] = list(langs.keys())
                except Exception as e:
                    logger.debug("languages lookup failed for %s: %s", repo["name"], e)
            repos.append(repo)

        if len(batch) < PER_PAGE:
            break
        page += 1

    logger.info("Fetched %d public repositories for %s", len(repos), username)
    return repos
