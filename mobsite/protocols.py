"""Protocol definitions for Mobsite.

These protocols describe the collaborators the build pipeline talks to
without owning: where records come from and where outputs go.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .mobs import Mob


@runtime_checkable
class MobSource(Protocol):
    """Protocol for fetching mob records."""

    @abstractmethod
    async def fetch(self) -> list[Mob]:
        """Fetch every record.

        Returns:
            Records in a stable order.

        Raises:
            DataSourceError: If the records cannot be fetched.
        """
        ...


@runtime_checkable
class OutputWriter(Protocol):
    """Protocol for writing build outputs.

    Final paths from the target table are the authoritative locations.
    """

    @abstractmethod
    def write(self, final_path: PurePosixPath, content: bytes) -> None:
        """Write one output.

        Args:
            final_path: Final path of the output, relative to the output root.
            content: Bytes to write.
        """
        ...
