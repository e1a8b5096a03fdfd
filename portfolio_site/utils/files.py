from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from ..core.errors import WriteError

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> Path:
    """Write ``text`` to ``path`` via a temp file in the same directory.

    The destination is replaced only after the new content is fully written,
    so a failure leaves any previous file untouched.

    Raises:
        WriteError: If the directory or file cannot be written.
    """
    return atomic_write_all([(Path(path), text)], encoding=encoding)[0]


def atomic_write_all(
    documents: Iterable[tuple[Path, str]], encoding: str = "utf-8"
) -> list[Path]:
    """Replace several files as a group.

    Every document is staged to a temp file before any destination changes.
    If a later replace fails, destinations already replaced are restored to
    their previous bytes (or removed if they did not exist), so readers never
    see a mix of old and new files.

    Raises:
        WriteError: If any file cannot be staged or replaced.
    """
    staged: list[tuple[Path, str]] = []
    try:
        for path, text in documents:
            path = Path(path)
            staged.append((path, _stage(path, text.encode(encoding))))
        previous = {path: _read_previous(path) for path, _ in staged}
    except WriteError:
        _discard(tmp for _, tmp in staged)
        raise

    replaced: list[Path] = []
    for index, (path, tmp_name) in enumerate(staged):
        try:
            os.replace(tmp_name, path)
        except OSError as exc:
            _discard(tmp for _, tmp in staged[index:])
            _rollback(replaced, previous)
            raise WriteError(f"Cannot write {path}: {exc}", path) from exc
        replaced.append(path)
    return replaced


def _stage(path: Path, data: bytes) -> str:
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(data)
        # NamedTemporaryFile creates 0600 files; published output must be world-readable.
        os.chmod(tmp_name, 0o644)
    except OSError as exc:
        if tmp_name is not None:
            _discard([tmp_name])
        raise WriteError(f"Cannot write {path}: {exc}", path) from exc
    return tmp_name


def _read_previous(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise WriteError(f"Cannot read {path}: {exc}", path) from exc


def _rollback(replaced: list[Path], previous: dict[Path, bytes | None]) -> None:
    for path in reversed(replaced):
        old = previous[path]
        try:
            if old is None:
                path.unlink()
            else:
                tmp_name = _stage(path, old)
                try:
                    os.replace(tmp_name, path)
                finally:
                    _discard([tmp_name])
        except OSError as exc:
            logger.error("Could not restore %s after a failed write: %s", path, exc)


def _discard(tmp_names: Iterable[str]) -> None:
    for tmp_name in tmp_names:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
