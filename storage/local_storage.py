"""Local filesystem storage implementation."""

from __future__ import annotations

import os
import re
import time
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from .abstract_storage import AbstractStorage


def timestamped_filename(original: str) -> str:
    """Prefix ``original`` with a millisecond timestamp and make it path safe."""

    dashed = re.sub(r"\s+", "-", original.strip())
    safe_name = secure_filename(dashed)
    if not safe_name:
        raise ValueError("Filename must contain at least one valid character.")
    return f"{int(time.time() * 1000)}-{safe_name}"


class LocalStorage(AbstractStorage):
    """Persist files to the local filesystem under the configured upload directory."""

    def __init__(self, upload_dir: str | os.PathLike):
        self.base_directory = Path(upload_dir)
        os.makedirs(self.base_directory, exist_ok=True)

    def save(self, file_obj: IO[bytes], filename: str) -> str:
        """Save a file under a timestamped name and return that name."""

        stored_name = timestamped_filename(filename)
        destination = self.base_directory / stored_name
        if hasattr(file_obj, "save"):
            file_obj.save(destination)  # type: ignore[arg-type]
        else:
            with open(destination, "wb") as output:
                output.write(file_obj.read())

        return stored_name

    def exists(self, name: str) -> bool:
        safe_name = secure_filename(name)
        return bool(safe_name) and safe_name == name and (self.base_directory / name).is_file()
