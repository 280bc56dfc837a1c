import argparse
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .errors import BuildError, SourceReadError, TimestampLookupError
from .jobs import DEFAULT_EXTENSION, DEFAULT_LAYOUT, DocumentJob, resolve_front_matter
from .tools import BuildTools, ConvertOptions, SubprocessTools, get_tools

DEFAULT_SOURCE_DIR = '_adoc'
DEFAULT_VERSION_LABEL = 'nanomsg'


class SiteBuilder:

    def __init__(
        self,
        source_dir: str = DEFAULT_SOURCE_DIR,
        tools: Optional[BuildTools] = None,
        extension: str = DEFAULT_EXTENSION,
        version_label: str = DEFAULT_VERSION_LABEL,
        layout: str = DEFAULT_LAYOUT,
        verbose: bool = True
    ):
        self.source_dir = Path(source_dir)
        self.tools = tools if tools is not None else get_tools(str(self.source_dir))
        self.extension = extension
        self.version_label = version_label
        self.layout = layout
        self.verbose = verbose

    def _log(self, message: str):
        # Print log message if verbose mode is on.
        if self.verbose:
            print(message)

    def _error(self, message: str):
        # Failures are always reported, quiet or not.
        print(message, file=sys.stderr)

    def discover(self) -> List[Path]:
        """Find every source document under the source directory.

        Paths are relative to the source directory. Hidden files and
        anything inside hidden directories are skipped, the way a shell
        glob would.
        """
        found = []
        for path in self.source_dir.rglob(f"*{self.extension}"):
            relative = path.relative_to(self.source_dir)
            if any(part.startswith('.') for part in relative.parts):
                continue
            if path.is_file():
                found.append(relative)
        return sorted(found)

    def _relative_target(self, target: str) -> Path:
        """Express a single target relative to the source directory.

        Absolute targets are compared after resolving symlinks on both
        sides; the file itself is left unresolved. Targets outside the
        source directory have no place in the site layout and are
        rejected.
        """
        path = Path(target)
        if path.is_absolute():
            resolved = path.parent.resolve() / path.name
            try:
                return resolved.relative_to(self.source_dir.resolve())
            except ValueError:
                raise BuildError(
                    f"{target} is outside the source directory {self.source_dir}"
                ) from None

        if Path(os.path.normpath(target)).parts[:1] == ('..',):
            raise BuildError(f"{target} is outside the source directory {self.source_dir}")
        return path

    def make_job(self, source: Path) -> DocumentJob:
        return DocumentJob.from_source(str(source), str(self.source_dir), self.extension)

    def process_job(self, job: DocumentJob) -> DocumentJob:
        # Build one page; raises on failure.
        try:
            job.timestamp = self.tools.last_change_timestamp(str(job.source_path))
        except TimestampLookupError as e:
            self._error(f"Warning: {e}; building {job.source_path} without a fixed date")
            job.timestamp = None

        job.attributes = job.converter_attributes(self.version_label)

        source_file = self.source_dir / job.source_path
        try:
            # newline='' keeps CRLF so reused front matter is copied byte for byte
            with open(source_file, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(job.source_path, e) from e

        job.front_matter = resolve_front_matter(content, job.version_string, self.layout)

        job.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(job.output_path, 'w', encoding='utf-8', newline='') as f:
            f.write(job.front_matter)

        options = ConvertOptions(
            attributes=job.attributes,
            doctype=job.doctype,
            source_date_epoch=job.timestamp,
        )
        html = self.tools.convert(str(job.source_path), options)

        with open(job.output_path, 'ab') as f:
            f.write(html)

        return job

    def run(self, target: Optional[str] = None) -> Dict[str, List[str]]:
        # Build the given document, or every document under the source directory.
        results = {'written': [], 'failed': []}

        if target:
            try:
                sources = [self._relative_target(target)]
            except BuildError as e:
                self._error(f"Error: {e}")
                results['failed'].append(str(target))
                sources = []
        else:
            sources = self.discover()

        for source in sources:
            job = self.make_job(source)
            self._log(f"Processing {job.source_path} -> {job.output_path}")

            # One bad document must not stop the rest of the site
            try:
                self.process_job(job)
            except (BuildError, OSError) as e:
                self._error(f"Error: {e}")
                results['failed'].append(str(job.source_path))
                continue

            results['written'].append(str(job.output_path))

        self._log(f"Pages written: {len(results['written'])}")
        if results['failed']:
            self._log(f"Pages failed: {len(results['failed'])}")

        return results


def main(argv: Optional[List[str]] = None):
    # CLI entry point.
    parser = argparse.ArgumentParser(
        description="adocsite - Render AsciiDoc sources into Jekyll-ready HTML pages"
    )
    parser.add_argument(
        "target",
        nargs="?",
        help="Single document to build, relative to the source directory "
             "(default: every document)"
    )
    parser.add_argument(
        "-s", "--source-dir",
        default=DEFAULT_SOURCE_DIR,
        help=f"Directory holding the AsciiDoc sources (default: {DEFAULT_SOURCE_DIR})"
    )
    parser.add_argument(
        "--converter",
        default=SubprocessTools.DEFAULT_CONVERTER,
        help="AsciiDoc converter executable (default: asciidoctor)"
    )
    parser.add_argument(
        "--git",
        default=SubprocessTools.DEFAULT_GIT,
        help="git executable used for page dates (default: git)"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any page failed to build"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress messages"
    )

    args = parser.parse_args(argv)

    if not Path(args.source_dir).is_dir():
        print(f"Error: source directory not found: {args.source_dir}", file=sys.stderr)
        sys.exit(1)

    builder = SiteBuilder(
        source_dir=args.source_dir,
        tools=get_tools(args.source_dir, converter=args.converter, git=args.git),
        verbose=not args.quiet
    )
    results = builder.run(args.target)

    if args.strict and results['failed']:
        sys.exit(1)


if __name__ == "__main__":
    main()
