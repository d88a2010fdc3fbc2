"""
Resolution of `loadin` targets to canonical file paths.

Search order for `loadin "name"` (the extension is always appended):

    1. <directory of the including file>/name.zr
    2. <root directory>/files/name.zr
    3. name.zr itself, when name is an absolute path

The root directory is the directory of the file the run started from. The
first candidate that is a regular file is canonicalised with realpath, so
the same file reached through different spellings or symlinks always
yields the same key.

Author: xwest
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from ..config import InterpreterConfig, DEFAULT_CONFIG
from ..lexer.tokens import SourceLocation
from .errors import create_module_not_found_error, create_path_too_long_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionContext:
    """Directories threaded through every recursive load."""
    current_dir: str
    root_dir: str

    def for_file(self, path: str) -> "ResolutionContext":
        """Context for resolving includes found inside `path`."""
        return ResolutionContext(os.path.dirname(path), self.root_dir)


class ModuleResolver:
    """Turns a `loadin` target into a canonical path."""

    def __init__(self, config: Optional[InterpreterConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def candidate_name(self, target: str, location: Optional[SourceLocation] = None) -> str:
        """
        Append the source extension.

        Raises:
            ModuleError: if the resulting name is longer than max_path_length (M004)
        """
        name = target + self.config.source_extension
        if len(name) > self.config.max_path_length:
            raise create_path_too_long_error(target, self.config.max_path_length, location)
        return name

    def candidates(self, target: str, context: ResolutionContext,
                   location: Optional[SourceLocation] = None) -> List[str]:
        """All paths tried for `target`, in search order, without duplicates."""
        name = self.candidate_name(target, location)

        paths = [
            os.path.join(context.current_dir, name),
            os.path.join(context.root_dir, self.config.library_dir, name),
        ]
        if os.path.isabs(target):
            paths.append(name)

        unique = []
        for path in paths:
            if path not in unique:
                unique.append(path)
        return unique

    def resolve(self, target: str, context: ResolutionContext,
                location: Optional[SourceLocation] = None) -> str:
        """
        Find the first existing regular file for `target`.

        Returns:
            Canonical absolute path

        Raises:
            ModuleError: when no candidate exists (M001) or the name is too long (M004)
        """
        tried = self.candidates(target, context, location)
        for path in tried:
            logger.debug("trying %s for loadin '%s'", path, target)
            if os.path.isfile(path):
                canonical = os.path.realpath(path)
                logger.debug("resolved loadin '%s' to %s", target, canonical)
                return canonical

        raise create_module_not_found_error(target, tried, location)
