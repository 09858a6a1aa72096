from .base import Store
from .filesystem import FilesystemStore

__all__ = ["Store", "FilesystemStore"]
