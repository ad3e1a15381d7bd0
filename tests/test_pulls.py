"""
Tests for pull request correlation (prs.json)

Tests verify:
- Both GraphQL shapes are accepted
- Only files under the target locale are kept, relative to its root
- Missing or malformed files yield an empty index with a warning
"""

import orjson

from l10n_audit.services.pulls import index_pull_requests, load_pull_requests


def pr_node(number, paths, login="dev"):
    return {
        "url": f"https://github.com/mdn/translated-content/pull/{number}",
        "number": number,
        "title": f"PR {number}",
        "author": {"login": login} if login else None,
        "files": {"nodes": [{"path": p} for p in paths]},
    }


SEARCH = {"data": {"search": {"nodes": [
    pr_node(1, ["files/zh-tw/web/a.md", "files/ja/web/a.md"]),
    pr_node(2, ["files/zh-tw/web/b/index.md"], login=None),
]}}}


class TestIndexPullRequests:

    def test_search_shape(self):
        index = index_pull_requests(SEARCH, "zh-TW")

        assert set(index.by_path) == {"web/a.md", "web/b/index.md"}
        assert index.get("web/a.md").number == 1
        assert index.total_pull_requests == 2

    def test_repository_shape(self):
        data = {"data": {"repository": {"pullRequests": {"nodes": [pr_node(5, ["files/zh-tw/x.md"])]}}}}
        assert index_pull_requests(data, "zh-tw").get("x.md").number == 5

    def test_other_locales_dropped(self):
        index = index_pull_requests(SEARCH, "ja")
        assert list(index.by_path) == ["web/a.md"]

    def test_missing_author(self):
        assert index_pull_requests(SEARCH, "zh-tw").get("web/b/index.md").user == "unknown"

    def test_to_dict(self):
        info = index_pull_requests(SEARCH, "zh-tw").get("web/a.md")
        assert info.to_dict() == {
            "url": "https://github.com/mdn/translated-content/pull/1",
            "number": 1,
            "title": "PR 1",
            "user": "dev",
        }

    def test_nodes_without_files(self):
        data = {"data": {"search": {"nodes": [{"url": "u", "files": None}, None]}}}
        assert len(index_pull_requests(data, "zh-tw")) == 0

    def test_unexpected_shape(self):
        assert len(index_pull_requests(["not", "a", "dict"], "zh-tw")) == 0


class TestLoadPullRequests:

    def test_load(self, tmp_path):
        path = tmp_path / "prs.json"
        path.write_bytes(orjson.dumps(SEARCH))

        index = load_pull_requests(path, "zh-tw")

        assert len(index) == 2
        assert index.warning is None

    def test_missing_file(self, tmp_path):
        index = load_pull_requests(tmp_path / "prs.json", "zh-tw")
        assert len(index) == 0
        assert "not found" in index.warning

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "prs.json"
        path.write_text("{not json", encoding="utf-8")

        index = load_pull_requests(path, "zh-tw")

        assert len(index) == 0
        assert "Could not parse" in index.warning
