"""Photo storage adapters."""

from .filesystem import FileSystemPhotoRepository

__all__ = ["FileSystemPhotoRepository"]
