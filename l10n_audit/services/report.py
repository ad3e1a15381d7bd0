"""
Report — Write audit results for the static viewer

Output directory layout:
    data.json    One record per document (AuditEntry.to_dict), sorted by path
    meta.json    {"prompt": ...} used by the viewer to build translation requests
    index.html   Copy of the viewer template, when one is configured and present

The prompt template carries two placeholders the viewer fills per document:
{{DIFF}} and {{CONTENT}}.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson

from ..config import OutputConfig


DEFAULT_PROMPT = "Please translate:\n\nDiff: {{DIFF}}\n\nContent: {{CONTENT}}"

DATA_FILE = "data.json"
META_FILE = "meta.json"
INDEX_FILE = "index.html"


@dataclass
class ReportFiles:
    """Paths written by one report."""
    data_path: Path
    meta_path: Path
    index_path: Optional[Path] = None
    record_count: int = 0


def dump_json(data: Any) -> bytes:
    """Indented JSON, non-ASCII kept verbatim."""
    return orjson.dumps(data, option=orjson.OPT_INDENT_2)


class ReportWriter:
    """
    Writes report files relative to a base directory.

    Relative paths in OutputConfig resolve against base_dir (the project
    directory), matching how the CLI resolves everything else.
    """

    def __init__(self, output: OutputConfig, base_dir: Optional[Path] = None):
        self.output = output
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()

    def _resolve(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        return candidate if candidate.is_absolute() else self.base_dir / candidate

    @property
    def output_dir(self) -> Path:
        return self._resolve(self.output.output_dir)

    def load_prompt(self) -> str:
        """Prompt template from prompt_path, or the default one."""
        prompt_path = self._resolve(self.output.prompt_path)
        if prompt_path.is_file():
            return prompt_path.read_text(encoding="utf-8")
        return DEFAULT_PROMPT

    def write(self, records: List[Dict[str, Any]]) -> ReportFiles:
        """
        Write data.json, meta.json and index.html.

        Raises:
            OSError: if the output directory cannot be written
        """
        out = self.output_dir
        out.mkdir(parents=True, exist_ok=True)

        data_path = out / DATA_FILE
        data_path.write_bytes(dump_json(records))

        meta_path = out / META_FILE
        meta_path.write_bytes(dump_json({"prompt": self.load_prompt()}))

        index_path = None
        template = self._resolve(self.output.template_path)
        if template.is_file():
            index_path = out / INDEX_FILE
            shutil.copyfile(template, index_path)

        return ReportFiles(
            data_path=data_path,
            meta_path=meta_path,
            index_path=index_path,
            record_count=len(records),
        )
