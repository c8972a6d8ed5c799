"""Upload storage backends."""

from .abstract_storage import AbstractStorage
from .local_storage import LocalStorage, timestamped_filename

__all__ = ["AbstractStorage", "LocalStorage", "timestamped_filename"]
