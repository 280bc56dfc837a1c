from __future__ import annotations

from pathlib import Path

import pytest

from adocsite.errors import ConversionError, TimestampLookupError
from adocsite.tools import BuildTools, ConvertOptions


class FakeTools(BuildTools):
    """Records calls and renders a fixed HTML snippet per source."""

    def __init__(self, source_root, timestamps=None, fail_convert=(), fail_lookup=()):
        super().__init__(source_root)
        self.timestamps = timestamps or {}
        self.fail_convert = set(fail_convert)
        self.fail_lookup = set(fail_lookup)
        self.conversions: list[tuple[str, ConvertOptions]] = []
        self.lookups: list[str] = []

    def convert(self, source, options):
        self.conversions.append((source, options))
        if source in self.fail_convert:
            raise ConversionError(source, returncode=1)
        return f"<p>{source}@{options.source_date_epoch}</p>\n".encode("utf-8")

    def last_change_timestamp(self, path):
        self.lookups.append(path)
        if path in self.fail_lookup:
            raise TimestampLookupError(f"git log {path}: fatal")
        return self.timestamps.get(path)


def write_doc(root: Path, relative: str, content: str = "= Title\n\nBody.\n") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path):
    """A site checkout: pages land in tmp_path, sources live in tmp_path/_adoc."""

    source_dir = tmp_path / "_adoc"
    source_dir.mkdir()
    return source_dir
