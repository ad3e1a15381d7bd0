"""
Pull Requests — Match open change requests to localized documents

Reads a GitHub GraphQL dump (prs.json) and maps each localized document
path to the pull request that touches it, so the report can flag work
already in progress.

Accepted shapes:
    {"data": {"search": {"nodes": [...]}}}
    {"data": {"repository": {"pullRequests": {"nodes": [...]}}}}

Only files under files/<target-locale>/ are kept, which drops pull
requests for sibling locales sharing the repository.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson


@dataclass(frozen=True)
class PullRequestInfo:
    """Pull request touching one localized document."""
    url: str
    number: Optional[int]
    title: str
    user: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "number": self.number,
            "title": self.title,
            "user": self.user,
        }


@dataclass
class PullRequestIndex:
    """Relative document path -> PullRequestInfo."""
    by_path: Dict[str, PullRequestInfo]
    total_pull_requests: int = 0
    warning: Optional[str] = None

    def get(self, relative_path: str) -> Optional[PullRequestInfo]:
        return self.by_path.get(relative_path)

    def __len__(self) -> int:
        return len(self.by_path)


def _pull_request_nodes(data: Any) -> List[Dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    payload = data.get("data") or {}
    search = (payload.get("search") or {}).get("nodes")
    if isinstance(search, list):
        return search
    repository = payload.get("repository") or {}
    nodes = (repository.get("pullRequests") or {}).get("nodes")
    return nodes if isinstance(nodes, list) else []


def index_pull_requests(data: Any, target_locale: str) -> PullRequestIndex:
    """Build the path index from already-parsed GraphQL data."""
    prefix = f"files/{target_locale.lower()}/"
    nodes = _pull_request_nodes(data)
    by_path: Dict[str, PullRequestInfo] = {}

    for pr in nodes:
        if not isinstance(pr, dict):
            continue
        files = (pr.get("files") or {}).get("nodes")
        if not files:
            continue

        info = PullRequestInfo(
            url=pr.get("url", ""),
            number=pr.get("number"),
            title=pr.get("title", ""),
            user=(pr.get("author") or {}).get("login") or "unknown",
        )
        for file in files:
            raw_path = (file or {}).get("path") or ""
            if raw_path.lower().startswith(prefix):
                by_path[raw_path[len(prefix):]] = info

    return PullRequestIndex(by_path=by_path, total_pull_requests=len(nodes))


def load_pull_requests(path: Path, target_locale: str) -> PullRequestIndex:
    """
    Load prs.json and index it by localized document path.

    A missing or unparsable file yields an empty index with a warning;
    pull request data only annotates the report.
    """
    path = Path(path)
    if not path.exists():
        return PullRequestIndex(by_path={}, warning=f"{path} not found, skipping pull request matching")

    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        return PullRequestIndex(by_path={}, warning=f"Could not parse {path}: {e}")

    return index_pull_requests(data, target_locale)
