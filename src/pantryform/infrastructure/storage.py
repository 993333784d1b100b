"""Output folder storage for generated PDFs.

Each stored file gets an ID (content hash) and a ``file://`` URL, the two
references written back to the response row.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path

_UNSAFE_CHARS = re.compile(r"[^\w.\- ]")


@dataclass(frozen=True)
class StoredFile:
    """A file written to the output folder."""

    id: str
    url: str
    path: Path


def safe_filename(name: str) -> str:
    """Replace path separators and other unsafe characters with ``_``."""
    cleaned = _UNSAFE_CHARS.sub("_", name).strip(" .")
    return cleaned or "untitled"


class OutputFolder:
    """Destination folder for generated documents."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def resolve(self, name: str, suffix: str = ".pdf") -> Path:
        """Resolve the path for *name*; never escapes the folder."""
        path = self.root / f"{safe_filename(name)}{suffix}"
        if not path.resolve().is_relative_to(self.root.resolve()):
            msg = f"Path escapes output folder: {path}"
            raise ValueError(msg)
        return path

    def store(self, name: str, data: bytes, *, suffix: str = ".pdf") -> StoredFile:
        """Write *data* as a new file named ``{name}{suffix}``.

        Existing files are never replaced: a taken name gets a ``_2``,
        ``_3``, ... suffix.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.resolve(name, suffix)
        attempt = 1
        while True:
            try:
                with path.open("xb") as fh:
                    fh.write(data)
                break
            except FileExistsError:
                attempt += 1
                path = self.resolve(f"{name}_{attempt}", suffix)
        file_id = hashlib.sha256(data).hexdigest()[:16]
        return StoredFile(id=file_id, url=path.resolve().as_uri(), path=path)
