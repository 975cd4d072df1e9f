"""ArtefactSink protocol for exported report files.

Adapters implement this protocol to persist rendered exports (JSON, CSV,
HTML). The protocol is ``runtime_checkable`` so callers can verify an
injected adapter with ``isinstance``.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ArtefactKind(enum.StrEnum):
    """Export formats with their file stem and extension."""

    JSON = "json"
    CSV = "csv"
    HTML = "html"


_STEMS = {
    ArtefactKind.JSON: "venue-events",
    ArtefactKind.CSV: "venue-events",
    ArtefactKind.HTML: "ticket-report",
}


@dc.dataclass(frozen=True, slots=True)
class ArtefactMetadata:
    """Identifying metadata for an exported file.

    Attributes
    ----------
    kind
        Export format.
    report_date
        Date the report was generated, used in the file name.

    """

    kind: ArtefactKind
    report_date: dt.date

    @property
    def file_name(self) -> str:
        """File name such as ``venue-events-2024-07-08.json``."""
        return f"{_STEMS[self.kind]}-{self.report_date.isoformat()}.{self.kind}"


@typ.runtime_checkable
class ArtefactSink(typ.Protocol):
    """Protocol for writing exported report artefacts."""

    async def write_artefact(
        self,
        content: str | bytes,
        *,
        metadata: ArtefactMetadata,
    ) -> Path:
        """Persist ``content`` and return where it was written."""
        ...


__all__ = ["ArtefactKind", "ArtefactMetadata", "ArtefactSink"]
