"""
=============================================================================
FILE STORE ACCESS CONTROLLER
=============================================================================

All filesystem access below the document root goes through FileStore.
Mutations (create, overwrite, delete) share ONE lock, so two uploads can
never interleave their bytes and a delete can never run halfway through a
write.

=============================================================================
LOCKING MODEL
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ONE CRITICAL SECTION                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Worker 1: POST /a.txt ──┐                                         │
    │   Worker 2: PUT  /b.txt ──┼──► [ _write_lock ] ──► disk             │
    │   Worker 3: DELETE /a.txt ┘      one at a time                      │
    │                                                                      │
    │   Worker 4: GET /a.txt ─────────────────────────► disk              │
    │   Worker 5: GET /b.txt ─────────────────────────► disk              │
    │                                 reads never wait                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The lock is coarse on purpose: uploads are rare compared to reads.

Reads are NOT serialized against writes. A GET that races a PUT on the
same path may see a truncated or half-written file. That is a known
limitation of this server, not something callers can rely on either way.

The lock is only ever taken with a ``with`` block, so it is released even
when the disk operation raises.

=============================================================================
PATH RESOLUTION
=============================================================================

    resource "/"            → <root>/index.html
    resource "/img/a.png"   → <root>/img/a.png
    resource "/../secret"   → <root>/../secret   (NOT sanitised)

The resource is joined verbatim. There is no percent-decoding and no
protection against ".." segments escaping the root.

=============================================================================
"""

import logging
import threading
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


class FileStore:
    """
    Filesystem access rooted at a document root.

    One instance is shared by every worker thread. Its only mutable state
    is the write lock.

    Usage:
        store = FileStore("./www")
        path = store.resolve("/notes/today.txt")
        store.store(path, b"hello")
        store.remove(path)
    """

    def __init__(self, document_root: Union[str, Path]):
        self.root = Path(document_root)
        self._write_lock = threading.Lock()

    # =========================================================================
    # PATH RESOLUTION
    # =========================================================================

    def resolve(self, resource: str) -> Path:
        """
        Map a request resource onto a path below the root.

        "/" becomes "/index.html". Empty segments (leading, doubled or
        trailing slashes) are dropped while joining.
        """
        if resource == "/":
            resource = "/" + INDEX_FILE
        return self.root.joinpath(*resource.split("/"))

    # =========================================================================
    # READS (unlocked)
    # =========================================================================

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> bytes:
        """Read a whole file. Raises OSError if it vanished meanwhile."""
        return path.read_bytes()

    # =========================================================================
    # MUTATIONS (serialized)
    # =========================================================================

    def store(self, path: Path, data: bytes, exclusive: bool = False) -> None:
        """
        Write ``data`` to ``path``, creating parent directories first.

        Args:
            path: Target file.
            data: Complete new contents.
            exclusive: Fail with FileExistsError instead of truncating an
                       existing file.

        Raises:
            OSError: The directory could not be created or the file written.
        """
        mode = "xb" if exclusive else "wb"
        with self._write_lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, mode) as f:
                f.write(data)
        logger.debug(f"Stored {len(data)} bytes at {path}")

    def remove(self, path: Path) -> bool:
        """
        Delete ``path`` if it is a regular file.

        The existence check and the delete happen inside the same critical
        section, so a concurrent writer cannot slip in between them.

        Returns:
            True if a file was deleted, False if there was nothing to delete.
        """
        with self._write_lock:
            if not path.is_file():
                return False
            path.unlink()
        logger.debug(f"Removed {path}")
        return True
