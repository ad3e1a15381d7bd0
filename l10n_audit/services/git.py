"""
Git Queries — Read-only revision queries against the content repository

Thin façade over the git executable. Every method issues exactly one git
process and never mutates the repository.

Queries:
- Existence of a path at a revision (cat-file -e)
- Content of a path at a revision (show rev:path)
- Streaming history of a subtree, newest-first (log --name-only)
- Rename-following history of one path inside a revision range
- Blob-to-blob and range diffs

Capabilities return explicit results (GitResult, Optional values) instead
of raising, so callers decide how a failure degrades.
"""

import subprocess
import tempfile
from pathlib import Path
from typing import Optional, List, Iterator
from dataclasses import dataclass


# Marker written before every commit hash in the history stream
HISTORY_MARKER = "::: "

# Bytes requested per read from the history pipe
HISTORY_CHUNK_SIZE = 64 * 1024

# Emit non-ASCII paths verbatim instead of C-quoted
GIT_BASE_ARGS = ["git", "-c", "core.quotepath=off"]


@dataclass(frozen=True)
class GitResult:
    """Outcome of a single git invocation."""
    ok: bool
    stdout: str = ""
    error: Optional[str] = None
    returncode: Optional[int] = None

    @classmethod
    def failure(cls, error: str, returncode: Optional[int] = None) -> 'GitResult':
        return cls(ok=False, error=error, returncode=returncode)


def blob_ref(revision: str, path: str) -> str:
    """Address a blob by revision and path (rev:path)."""
    return f"{revision}:{path}"


class HistoryStream:
    """
    Byte stream of `git log` output for one subtree.

    Use as a context manager and iterate for raw chunks. Chunks are
    arbitrary slices of the output; records may span chunk boundaries.
    After iteration, `returncode` and `error` describe how git exited.

        with query.stream_history("files/en-us") as stream:
            for chunk in stream:
                parser.feed(chunk)
        if stream.returncode != 0: ...
    """

    def __init__(self, args: List[str], cwd: Path, chunk_size: int = HISTORY_CHUNK_SIZE):
        self._args = args
        self._cwd = cwd
        self._chunk_size = chunk_size
        self._process: Optional[subprocess.Popen] = None
        self._stderr = None
        self.returncode: Optional[int] = None
        self.error: Optional[str] = None

    def __enter__(self) -> 'HistoryStream':
        # stderr goes to a file so a full stderr pipe cannot stall stdout
        self._stderr = tempfile.TemporaryFile()
        try:
            self._process = subprocess.Popen(
                self._args,
                cwd=self._cwd,
                stdout=subprocess.PIPE,
                stderr=self._stderr,
            )
        except OSError as e:
            self._stderr.close()
            self.returncode = -1
            self.error = f"Could not start git: {e}"
        return self

    def __iter__(self) -> Iterator[bytes]:
        if self._process is None:
            return
        while True:
            chunk = self._process.stdout.read(self._chunk_size)
            if not chunk:
                break
            yield chunk

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._process is None:
            return
        if exc_type is not None:
            # Consumer aborted mid-stream; do not leave git blocked on the pipe
            self._process.kill()
        self._process.stdout.close()
        self.returncode = self._process.wait()
        self._stderr.seek(0)
        stderr = self._stderr.read()
        self._stderr.close()
        if self.returncode != 0:
            self.error = stderr.decode("utf-8", errors="replace").strip() or (
                f"git exited with status {self.returncode}"
            )


class RevisionQuery:
    """Read-only git queries for one repository."""

    def __init__(self, repo_path: Optional[Path] = None):
        """
        Args:
            repo_path: Path to the git working tree. If None, uses current directory.
        """
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()

    @property
    def is_git_repo(self) -> bool:
        """Check if repo_path is inside a git working tree."""
        result = self._run_git(["rev-parse", "--is-inside-work-tree"])
        return result.ok and result.stdout.strip() == "true"

    def _run_git(self, args: List[str]) -> GitResult:
        """Run a git command and capture its text output."""
        try:
            completed = subprocess.run(
                GIT_BASE_ARGS + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            return GitResult.failure(f"Could not start git: {e}")

        if completed.returncode != 0:
            return GitResult.failure(
                completed.stderr.strip() or f"git exited with status {completed.returncode}",
                returncode=completed.returncode,
            )
        return GitResult(ok=True, stdout=completed.stdout, returncode=0)

    def exists_at(self, revision: str, path: str) -> bool:
        """True if `path` exists in the tree of `revision`."""
        try:
            completed = subprocess.run(
                GIT_BASE_ARGS + ["cat-file", "-e", blob_ref(revision, path)],
                cwd=self.repo_path,
                capture_output=True,
            )
        except OSError:
            return False
        return completed.returncode == 0

    def read_blob(self, revision: str, path: str) -> Optional[bytes]:
        """Raw content of `path` at `revision`, or None if not found."""
        try:
            completed = subprocess.run(
                GIT_BASE_ARGS + ["show", blob_ref(revision, path)],
                cwd=self.repo_path,
                capture_output=True,
            )
        except OSError:
            return None
        if completed.returncode != 0:
            return None
        return completed.stdout

    def stream_history(self, subtree: str, chunk_size: int = HISTORY_CHUNK_SIZE) -> HistoryStream:
        """
        History of `subtree`, newest-first, one marker line per commit
        followed by the paths that commit touched.
        """
        args = GIT_BASE_ARGS + [
            "log", f"--format={HISTORY_MARKER}%H", "--name-only", "--", subtree
        ]
        return HistoryStream(args, self.repo_path, chunk_size=chunk_size)

    def follow_history(self, from_revision: str, to_revision: str, path: str) -> Optional[List[str]]:
        """
        Names `path` has held in the range (from_revision, to_revision],
        newest first, following renames.

        A rename commit contributes its destination then its source, so
        the last name is the one held before the oldest commit in range.

        Returns None when the query fails; an empty list when the range
        holds no history for the path.
        """
        result = self._run_git([
            "log", "--follow", "--name-status", "--format=",
            f"{from_revision}..{to_revision}", "--", path
        ])
        if not result.ok:
            return None

        names: List[str] = []
        for line in result.stdout.split("\n"):
            parts = line.rstrip("\r").split("\t")
            if len(parts) < 2 or not parts[0]:
                continue
            status = parts[0]
            if status[0] in ("R", "C") and len(parts) >= 3:
                # R100 old new
                names.extend([parts[2], parts[1]])
            else:
                names.append(parts[1])
        return names

    def diff_blobs(
        self,
        from_revision: str,
        from_path: str,
        to_revision: str,
        to_path: str,
        word_diff: bool = True,
    ) -> GitResult:
        """Diff two blobs by content identity, independent of their tree paths."""
        args = ["diff", "--no-color"]
        if word_diff:
            args.append("--word-diff=plain")
        args += [blob_ref(from_revision, from_path), blob_ref(to_revision, to_path)]
        return self._run_git(args)

    def diff_range(self, from_revision: str, to_revision: str, path: str, word_diff: bool = True) -> GitResult:
        """Tree diff of one path between two revisions."""
        args = ["diff", "--no-color"]
        if word_diff:
            args.append("--word-diff=plain")
        args += [from_revision, to_revision, "--", path]
        return self._run_git(args)
