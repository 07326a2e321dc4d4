from __future__ import annotations

import logging
import os
import secrets
import time
from pathlib import Path

from monitor.errors import UnsupportedKeyFormat

logger = logging.getLogger(__name__)

PPK_MARKER = "PuTTY-User-Key-File"


def normalize_private_key(material: str) -> str:
    """Collapse escaped, CRLF and CR line endings to ``\\n`` and trim."""
    return (
        material.replace("\\n", "\n")
        .replace("\r\n", "\n")
        .replace("\r", "\n")
        .strip()
    )


def ensure_supported_key_format(key: str) -> None:
    if PPK_MARKER in key:
        raise UnsupportedKeyFormat()


class TransientKeyFile:
    """Owner-only key file that lives for exactly one request.

    Use as a context manager: the file is written on enter and removed on
    exit, whatever happened in between.
    """

    def __init__(self, directory: str | Path, material: str) -> None:
        self.directory = Path(directory)
        self.path = self.directory / f"key-{int(time.time() * 1000)}-{secrets.token_hex(4)}"
        self._material = material

    def write(self) -> Path:
        self.directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(self._material + "\n")
        return self.path

    def remove(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError:
            logger.debug("Could not remove transient key file %s", self.path, exc_info=True)

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def __enter__(self) -> Path:
        try:
            return self.write()
        except BaseException:
            self.remove()
            raise

    def __exit__(self, *exc_info) -> None:
        self.remove()
