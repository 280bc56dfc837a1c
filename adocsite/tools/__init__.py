from .base import BuildTools, ConvertOptions
from .subprocess_tools import SubprocessTools

def get_tools(
    source_root: str,
    converter: str = SubprocessTools.DEFAULT_CONVERTER,
    git: str = SubprocessTools.DEFAULT_GIT,
) -> BuildTools:
    return SubprocessTools(source_root, converter=converter, git=git)

__all__ = ['BuildTools', 'ConvertOptions', 'SubprocessTools', 'get_tools']
