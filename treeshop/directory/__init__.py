"""
directory/ - Record directories and storage backends.
"""

from .store import (
    Directory,
    DirectoryChange,
    ChangeAction,
    ChangeListener,
)

from .persistence import (
    JsonFilePersistence,
    InMemoryPersistence,
)


__all__ = [
    "Directory",
    "DirectoryChange",
    "ChangeAction",
    "ChangeListener",
    "JsonFilePersistence",
    "InMemoryPersistence",
]
