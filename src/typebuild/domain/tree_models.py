from __future__ import annotations

"""
Traversal Domain Models.

Defines the transient record produced by the tree walker. Entries only live
for the duration of a traversal call and are never persisted.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class FileEntry:
    """
    A single filesystem node discovered during traversal.

    Attributes:
        absolute_path: Absolute path of the node.
        is_directory: True if the node is a directory.
    """
    absolute_path: str
    is_directory: bool

    @property
    def name(self) -> str:
        return os.path.basename(self.absolute_path)
