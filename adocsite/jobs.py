import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

DEFAULT_EXTENSION = '.adoc'
DEFAULT_LAYOUT = 'default'

# Release directories look like v1.0.0, v2, v1.1-beta
VERSION_DIR_RE = re.compile(r'^v[0-9]')

# A leading ---/--- block with LF or CRLF lines; the first closing delimiter ends it
FRONT_MATTER_RE = re.compile(r'\A---\r?\n(?:.*?\r?\n)?---\r?\n', re.DOTALL)


def strip_extension(name: str, extension: str = DEFAULT_EXTENSION) -> str:
    # Drop the source extension, or the last suffix for other files.
    if extension and name.endswith(extension) and name != extension:
        return name[:-len(extension)]
    return os.path.splitext(name)[0]


def output_path_for(
    source_path: str,
    source_root: str,
    extension: str = DEFAULT_EXTENSION
) -> Path:
    """Map a source document to its HTML page.

    The page mirrors the source's directory one level above the
    source root, with the extension replaced by ``.html``. ``.`` and
    ``..`` segments are collapsed.
    """
    source = Path(source_path)
    out_dir = os.path.normpath(
        os.path.join(str(source_root), '..', str(source.parent))
    )
    return Path(out_dir) / f"{strip_extension(source.name, extension)}.html"


def version_of(source_path: str) -> Optional[str]:
    # Version string for documents under a release directory, else None.
    parts = Path(source_path).parts
    if not parts:
        return None

    first = parts[0]
    if not VERSION_DIR_RE.match(first):
        return None
    return first[1:]


def extract_front_matter(content: str) -> Optional[str]:
    # Return the document's own front matter block verbatim, if any.
    match = FRONT_MATTER_RE.match(content)
    if match:
        return match.group(0)
    return None


def resolve_front_matter(
    content: str,
    version: Optional[str],
    layout: str = DEFAULT_LAYOUT
) -> str:
    """Front matter to put ahead of the rendered page.

    An existing block in the source always wins. Otherwise manual pages
    get a minimal block naming their version and layout, and everything
    else gets nothing.
    """
    existing = extract_front_matter(content)
    if existing is not None:
        return existing

    if version is not None:
        return f"---\nversion: {version}\nlayout: {layout}\n---\n"

    return ''


@dataclass
class DocumentJob:
    # One source document on its way to an HTML page
    source_path: Path
    output_path: Path
    version_string: Optional[str] = None
    timestamp: Optional[int] = None
    front_matter: str = ''
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_source(
        cls,
        source_path: str,
        source_root: str,
        extension: str = DEFAULT_EXTENSION
    ) -> 'DocumentJob':
        return cls(
            source_path=Path(source_path),
            output_path=output_path_for(source_path, source_root, extension),
            version_string=version_of(source_path),
        )

    @property
    def is_versioned(self) -> bool:
        return self.version_string is not None

    @property
    def doctype(self) -> Optional[str]:
        # Manual pages render with asciidoctor's manpage doctype.
        return 'manpage' if self.is_versioned else None

    def converter_attributes(self, version_label: str) -> Dict[str, str]:
        if not self.is_versioned:
            return {}

        return {
            'version-label': version_label,
            'revnumber': self.version_string,
        }
