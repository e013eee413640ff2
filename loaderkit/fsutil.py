"""Async filesystem primitives.

Every call runs the blocking operation in a worker thread so each filesystem
access is a suspension point for the event loop. Errors propagate unchanged.
"""

import asyncio
import os
import shutil
from pathlib import Path
from typing import List


async def ensure_dir(path: Path) -> None:
    await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=True)


async def list_dir(path: Path) -> List[str]:
    """Return the entry names of a directory, sorted."""
    return sorted(await asyncio.to_thread(os.listdir, path))


async def read_bytes(path: Path) -> bytes:
    return await asyncio.to_thread(Path(path).read_bytes)


async def read_text(path: Path, errors: str = "strict") -> str:
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8", errors=errors)


async def write_bytes(path: Path, data: bytes) -> None:
    await asyncio.to_thread(Path(path).write_bytes, data)


async def write_text(path: Path, text: str) -> None:
    await asyncio.to_thread(Path(path).write_text, text, encoding="utf-8")


async def unlink(path: Path, missing_ok: bool = False) -> None:
    await asyncio.to_thread(Path(path).unlink, missing_ok=missing_ok)


async def remove_tree(path: Path) -> None:
    """Remove a directory tree; a missing directory is not an error."""
    if await asyncio.to_thread(Path(path).exists):
        await asyncio.to_thread(shutil.rmtree, path)


async def list_files(path: Path) -> List[str]:
    """Return the names of the regular files in a directory, sorted."""

    def _files() -> List[str]:
        return sorted(entry.name for entry in os.scandir(path) if entry.is_file())

    return await asyncio.to_thread(_files)
