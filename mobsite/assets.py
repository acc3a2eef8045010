"""Asset declarations for Mobsite.

An asset is one build output: a logical path plus a deferred operation that
produces its bytes. The operation comes in two forms:

- PlainSource: needs nothing but itself (copying a stylesheet, a logo).
- TableSource: receives the completed target table, so the content can link
  to other outputs by their final location.

Neither form runs at declaration time. The resolver invokes each one exactly
once, after every asset has been enumerated and the target table is built.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Union

from .targets import logical_path

if TYPE_CHECKING:
    from .targets import Targets

Content = Union[bytes, str]


@dataclass(frozen=True)
class PlainSource:
    """Content that does not depend on any other asset's location.

    Attributes:
        load: Zero-argument callable returning bytes, or an awaitable of bytes.
    """

    load: Callable[[], Content | Awaitable[Content]]


@dataclass(frozen=True)
class TableSource:
    """Content rendered with the target table at hand.

    Attributes:
        render: Callable taking the current asset's Targets view and
            returning bytes or text, or an awaitable of either.
    """

    render: Callable[[Targets], Content | Awaitable[Content]]


Source = Union[PlainSource, TableSource]


@dataclass(frozen=True)
class Asset:
    """One declared build output.

    Attributes:
        path: Logical path, unique across the build.
        source: Deferred content operation.
    """

    path: PurePosixPath
    source: Source

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", logical_path(self.path))
        if not isinstance(self.source, (PlainSource, TableSource)):
            raise TypeError(
                f"Asset {self.path} needs a PlainSource or TableSource, "
                f"got {type(self.source).__name__}"
            )

    @property
    def table_aware(self) -> bool:
        return isinstance(self.source, TableSource)


def bytes_asset(path: str | PurePosixPath, data: bytes) -> Asset:
    """Declare an asset whose content is already known."""
    return Asset(logical_path(path), PlainSource(lambda: data))


def file_asset(path: str | PurePosixPath, file: Path) -> Asset:
    """Declare an asset copied from a file on disk.

    The file is read off the event loop when the asset is resolved, not when
    it is declared.

    Args:
        path: Logical path of the output.
        file: Source file to copy.

    Returns:
        A plain asset.
    """

    async def load() -> bytes:
        return await asyncio.to_thread(file.read_bytes)

    return Asset(logical_path(path), PlainSource(load))
