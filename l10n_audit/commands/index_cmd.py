"""
IndexCommand — Build the source history index and summarise it

Useful to check repository settings and history size before a full run.
With --json the index itself is written to stdout for other tools.
"""

import time
from collections import Counter
from typing import Optional

import orjson

from ..commands.base import BaseCommand
from ..core.audit import open_content_repo
from ..core.history import HistoryIndexBuilder
from ..presentation.symbols import safe_print


class IndexCommand(BaseCommand):
    """Build {path -> latest revision} for the source subtree."""

    def index(self, content_repo: Optional[str] = None, top: int = 10, as_json: bool = False):
        """
        Build and report the index.

        Args:
            content_repo: Override the configured content repository
            top: How many top-level sections to list by document count
            as_json: Write the index as JSON instead of a summary

        Raises:
            ConfigError: if the content repository is not usable
            HistoryFeedError: if the history cannot be read
        """
        symbols = self.symbols
        config = self._cli.effective_config({"repository": {"content_repo": content_repo}})
        query = open_content_repo(config)
        subtree = config.repository.source_subtree

        started = time.perf_counter()
        builder = HistoryIndexBuilder(query)
        index = builder.build(subtree)
        elapsed = time.perf_counter() - started

        if as_json:
            safe_print(orjson.dumps(dict(index), option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode("utf-8"))
            return index

        suffix = config.repository.document_suffix
        prefix = subtree + "/"
        documents = [p for p in index if p.startswith(prefix) and p.endswith(suffix)]
        sections = Counter(p[len(prefix):].split("/", 1)[0] for p in documents)

        safe_print(f"History index for {subtree} in {config.repository.content_repo}")
        safe_print(f"  {symbols.tree_branch} {builder.record_count} commit record(s) read")
        safe_print(f"  {symbols.tree_branch} {len(index)} path(s) indexed")
        safe_print(f"  {symbols.tree_end} {len(documents)} document(s) ending in {suffix}")

        if sections and top > 0:
            safe_print("")
            safe_print("Largest sections:")
            for name, count in sections.most_common(top):
                safe_print(f"  {symbols.bullet} {name}: {count}")

        safe_print("")
        safe_print(f"{symbols.check_pass} Indexed in {elapsed:.1f}s")
        return index


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register index command parser."""
    p = subparsers.add_parser('index', help='Build the source history index and summarise it')
    p.add_argument('--content-repo', help='Source content repository (overrides config)')
    p.add_argument('--top', type=int, default=10, help='Sections to list (default: 10)')
    p.add_argument('--json', action='store_true', help='Write the index as JSON to stdout')
    return p


def handle(cli, args):
    """Handle index command dispatch."""
    cli._index_cmd.index(content_repo=args.content_repo, top=args.top, as_json=args.json)
