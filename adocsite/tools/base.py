"""Base build tools class"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


@dataclass
class ConvertOptions:
    # Rendering options for a single converter run
    attributes: Dict[str, str] = field(default_factory=dict)
    doctype: Optional[str] = None
    source_date_epoch: Optional[int] = None
    backend: str = 'html5'
    skip_front_matter: bool = True


class BuildTools(ABC):
    """Abstract base class for the external programs a build relies on.

    The pipeline only talks to these two capabilities, so tests can
    swap in fakes without touching a converter or a repository.
    """

    def __init__(self, source_root: str):
        self.source_root = Path(source_root)

    @abstractmethod
    def convert(self, source: str, options: ConvertOptions) -> bytes:
        """Render a source document to HTML.

        Args:
            source: Document path, relative to the source root
            options: Rendering options, including the reproducibility pin

        Returns:
            The rendered HTML

        Raises:
            ConversionError: The converter failed or rendered nothing
        """
        pass

    @abstractmethod
    def last_change_timestamp(self, path: str) -> Optional[int]:
        """Seconds since the epoch of the last recorded change to ``path``.

        Returns None when the path has no history. Raises
        TimestampLookupError when the history cannot be queried.
        """
        pass
