"""Filesystem adapter for the ArtefactSink protocol.

Usage
-----
>>> import asyncio, datetime as dt
>>> from pathlib import Path
>>> sink = FilesystemArtefactSink(Path("exports"))
>>> meta = ArtefactMetadata(kind=ArtefactKind.CSV, report_date=dt.date(2024, 7, 8))
>>> asyncio.run(sink.write_artefact("Title\\n", metadata=meta))
PosixPath('exports/venue-events-2024-07-08.csv')

"""

from __future__ import annotations

import asyncio
import typing as typ

from .sink import ArtefactKind, ArtefactMetadata

if typ.TYPE_CHECKING:
    from pathlib import Path


class FilesystemArtefactSink:
    """Write artefacts into one directory, creating it on first use."""

    def __init__(self, base_path: Path) -> None:
        """Initialise the sink with a base directory path."""
        self._base_path = base_path

    async def write_artefact(
        self,
        content: str | bytes,
        *,
        metadata: ArtefactMetadata,
    ) -> Path:
        """Write ``content`` to ``{base_path}/{metadata.file_name}``."""
        await asyncio.to_thread(self._base_path.mkdir, parents=True, exist_ok=True)
        path = self._base_path / metadata.file_name
        if isinstance(content, bytes):
            await asyncio.to_thread(path.write_bytes, content)
        else:
            await asyncio.to_thread(path.write_text, content, "utf-8")
        return path


__all__ = ["ArtefactKind", "ArtefactMetadata", "FilesystemArtefactSink"]
