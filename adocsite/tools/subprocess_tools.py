import os
import subprocess
from typing import Dict, List, Optional

from ..errors import ConversionError, TimestampLookupError
from .base import BuildTools, ConvertOptions

EPOCH_VAR = 'SOURCE_DATE_EPOCH'


class SubprocessTools(BuildTools):
    # asciidoctor for rendering, git for history; both run from the source root.

    DEFAULT_CONVERTER = 'asciidoctor'
    DEFAULT_GIT = 'git'

    def __init__(
        self,
        source_root: str,
        converter: str = DEFAULT_CONVERTER,
        git: str = DEFAULT_GIT
    ):
        super().__init__(source_root)
        self.converter = converter
        self.git = git

    def converter_command(self, source: str, options: ConvertOptions) -> List[str]:
        cmd = [self.converter, '-b', options.backend]
        if options.skip_front_matter:
            cmd += ['-a', 'skip-front-matter']
        for name, value in options.attributes.items():
            cmd += ['-a', f"{name}={value}"]
        if options.doctype:
            cmd += ['-d', options.doctype]
        cmd += ['-o', '-', str(source)]
        return cmd

    def converter_env(self, source_date_epoch: Optional[int]) -> Dict[str, str]:
        # Pin the render date when history is known, never leak the caller's pin.
        env = dict(os.environ)
        env.pop(EPOCH_VAR, None)
        if source_date_epoch is not None:
            env[EPOCH_VAR] = str(source_date_epoch)
        return env

    def convert(self, source: str, options: ConvertOptions) -> bytes:
        cmd = self.converter_command(source, options)

        # stderr stays attached so converter warnings reach the console
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.source_root),
                env=self.converter_env(options.source_date_epoch),
                stdout=subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ConversionError(source, message=f"{self.converter} not found") from e

        if result.returncode != 0:
            raise ConversionError(source, returncode=result.returncode)
        if not result.stdout:
            raise ConversionError(source, returncode=0, message="no output")

        return result.stdout

    def last_change_timestamp(self, path: str) -> Optional[int]:
        cmd = [
            self.git, 'log', '-n1',
            '--format=%ad', '--date=format-local:%s',
            '--', str(path)
        ]

        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.source_root),
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise TimestampLookupError(f"{self.git} not found") from e

        if result.returncode != 0:
            reason = result.stderr.strip() or f"exit status {result.returncode}"
            raise TimestampLookupError(f"git log {path}: {reason}")

        stamp = result.stdout.strip()
        if not stamp:
            # Untracked or never committed
            return None

        try:
            return int(stamp)
        except ValueError as e:
            raise TimestampLookupError(f"git log {path}: unexpected output {stamp!r}") from e
