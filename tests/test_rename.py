"""
Tests for RenameResolver — document path at an older revision

Tests verify:
- DIRECT when the path already existed at the older revision
- RENAMED when the document was moved in between, resolving the old name
- NEW when the document did not exist at the older revision
- A rename-aware diff shows only the edit, not a whole-file addition
"""

from l10n_audit.core.diff import DiffComputer
from l10n_audit.core.rename import RenameResolver, ResolutionKind
from l10n_audit.services.git import RevisionQuery
from tests.factories import requires_git


BODY = "# Title\n\nFirst paragraph stays.\n\nSecond paragraph stays too.\n\nOriginal sentence.\n"


@requires_git
class TestRenameResolver:

    def test_direct(self, audit_repos):
        first = audit_repos.commit_source({"a.md": BODY})
        second = audit_repos.commit_source({"a.md": BODY + "More.\n"})
        path = audit_repos.source_path("a.md")

        trace = RenameResolver(RevisionQuery(audit_repos.content)).resolve(first, second, path)

        assert trace.kind == ResolutionKind.DIRECT
        assert trace.old_path == path

    def test_renamed(self, audit_repos):
        first = audit_repos.commit_source({"old/doc.md": BODY})
        audit_repos.rename_source("old/doc.md", "new/doc.md")
        third = audit_repos.commit_source({"new/doc.md": BODY.replace("Original", "Edited")})

        trace = RenameResolver(RevisionQuery(audit_repos.content)).resolve(
            first, third, audit_repos.source_path("new/doc.md")
        )

        assert trace.kind == ResolutionKind.RENAMED
        assert trace.old_path == audit_repos.source_path("old/doc.md")

    def test_renamed_twice(self, audit_repos):
        first = audit_repos.commit_source({"one.md": BODY})
        audit_repos.rename_source("one.md", "two.md")
        last = audit_repos.rename_source("two.md", "three.md")

        trace = RenameResolver(RevisionQuery(audit_repos.content)).resolve(
            first, last, audit_repos.source_path("three.md")
        )

        assert trace.kind == ResolutionKind.RENAMED
        assert trace.old_path == audit_repos.source_path("one.md")

    def test_new(self, audit_repos):
        first = audit_repos.commit_source({"a.md": BODY})
        second = audit_repos.commit_source({"b.md": "Brand new.\n"})

        trace = RenameResolver(RevisionQuery(audit_repos.content)).resolve(
            first, second, audit_repos.source_path("b.md")
        )

        assert trace.kind == ResolutionKind.NEW
        assert trace.old_path is None

    def test_unknown_from_revision_is_new(self, audit_repos):
        second = audit_repos.commit_source({"a.md": BODY})

        trace = RenameResolver(RevisionQuery(audit_repos.content)).resolve(
            "f" * 40, second, audit_repos.source_path("a.md")
        )

        assert trace.kind == ResolutionKind.NEW

    def test_renamed_diff_shows_only_edit(self, audit_repos):
        first = audit_repos.commit_source({"old/doc.md": BODY})
        audit_repos.rename_source("old/doc.md", "new/doc.md")
        third = audit_repos.commit_source({"new/doc.md": BODY.replace("Original", "Edited")})
        query = RevisionQuery(audit_repos.content)

        trace = RenameResolver(query).resolve(first, third, audit_repos.source_path("new/doc.md"))
        diff = DiffComputer(query).compute(trace)

        assert not diff.failed
        assert "[-Original-]{+Edited+}" in diff.text
        assert "{+# Title" not in diff.text
        assert "new file mode" not in diff.text


@requires_git
class TestFollowHistory:

    def test_names_newest_first(self, audit_repos):
        first = audit_repos.commit_source({"one.md": BODY})
        last = audit_repos.rename_source("one.md", "two.md")

        names = RevisionQuery(audit_repos.content).follow_history(
            first, last, audit_repos.source_path("two.md")
        )

        assert names == [audit_repos.source_path("two.md"), audit_repos.source_path("one.md")]

    def test_bad_range_is_none(self, audit_repos):
        audit_repos.commit_source({"one.md": BODY})
        query = RevisionQuery(audit_repos.content)

        assert query.follow_history("nope", "HEAD", "files/en-us/one.md") is None
