"""Asset resolution for Mobsite.

Given the complete asset list and its target table, the resolver invokes each
asset's content operation and collects one outcome per asset. Operations run
concurrently; the only state they share is the read-only target table.

A failing asset never stops the others. Every outcome, successful or not, is
reported in declaration order, so the report does not depend on the order in
which operations happen to complete.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Iterator, Sequence
from contextlib import AsyncExitStack
from dataclasses import dataclass
from pathlib import PurePosixPath

from .assets import Asset, PlainSource, TableSource
from .exceptions import ContentGenerationError
from .targets import TargetTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetOutcome:
    """Result of resolving one asset.

    Attributes:
        path: Logical path of the asset.
        final_path: Where the output belongs, per the target table. None if
            the asset is missing from the table.
        content: Produced bytes, or None if the operation failed.
        error: The failure, or None if the operation succeeded.
    """

    path: PurePosixPath
    final_path: PurePosixPath | None
    content: bytes | None = None
    error: ContentGenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ResolutionReport(Sequence[AssetOutcome]):
    """Outcomes of one resolution run, in asset declaration order."""

    def __init__(self, outcomes: Iterable[AssetOutcome]):
        self._outcomes = list(outcomes)

    def __iter__(self) -> Iterator[AssetOutcome]:
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def __getitem__(self, item):
        return self._outcomes[item]

    @property
    def succeeded(self) -> list[AssetOutcome]:
        return [o for o in self._outcomes if o.ok]

    @property
    def failed(self) -> list[AssetOutcome]:
        return [o for o in self._outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self._outcomes)

    def outcome(self, path: str | PurePosixPath) -> AssetOutcome:
        """Return the outcome for a logical path.

        Raises:
            KeyError: If no asset with that path was resolved.
        """
        key = PurePosixPath(path)
        for outcome in self._outcomes:
            if outcome.path == key:
                return outcome
        raise KeyError(key)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return (
            f"ResolutionReport({len(self.succeeded)} ok, {len(self.failed)} failed)"
        )


def _to_bytes(path: PurePosixPath, content: object) -> bytes:
    if isinstance(content, bytes):
        return content
    if isinstance(content, str):
        return content.encode("utf-8")
    raise ContentGenerationError(
        f"Content operation returned {type(content).__name__}, expected bytes or str",
        path,
    )


async def produce(asset: Asset, table: TargetTable) -> bytes:
    """Run one asset's content operation and return its bytes.

    Raises:
        ContentGenerationError: If the operation fails for any reason.
    """
    source = asset.source
    try:
        if isinstance(source, PlainSource):
            result = source.load()
        elif isinstance(source, TableSource):
            result = source.render(table.for_asset(asset.path))
        else:
            raise TypeError(f"Unknown content source: {type(source).__name__}")
        if inspect.isawaitable(result):
            result = await result
        return _to_bytes(asset.path, result)
    except ContentGenerationError as exc:
        if exc.path is None:
            exc.path = asset.path
        raise
    except Exception as exc:
        raise ContentGenerationError(
            f"{type(exc).__name__}: {exc}", asset.path
        ) from exc


async def resolve(
    assets: Sequence[Asset], table: TargetTable, jobs: int | None = None
) -> ResolutionReport:
    """Resolve every asset concurrently and collect all outcomes.

    Args:
        assets: The complete asset list the table was built from.
        table: The completed target table.
        jobs: Optional limit on operations running at the same time.

    Returns:
        One outcome per asset, in the order the assets were given.
    """
    limiter = asyncio.Semaphore(jobs) if jobs else None

    async def run(asset: Asset) -> AssetOutcome:
        final_path = None
        async with AsyncExitStack() as stack:
            if limiter is not None:
                await stack.enter_async_context(limiter)
            try:
                final_path = table.get(asset.path)
                content = await produce(asset, table)
            except ContentGenerationError as exc:
                if exc.path is None:
                    exc.path = asset.path
                logger.warning("Failed to build %s: %s", asset.path, exc)
                return AssetOutcome(asset.path, final_path, error=exc)
        logger.debug("Built %s (%d bytes)", asset.path, len(content))
        return AssetOutcome(asset.path, final_path, content=content)

    outcomes = await asyncio.gather(*(run(asset) for asset in assets))
    return ResolutionReport(outcomes)
