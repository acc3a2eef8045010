"""Asset enumeration for Mobsite.

The asset list is a fixed, statically known part followed by one asset per
record fetched from a data source. Enumeration must finish before the target
table is built, and it fails fast: a data source failure or two assets
sharing a logical path abort the whole build.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from pathlib import PurePosixPath
from typing import TypeVar, Union

from .assets import Asset
from .exceptions import DataSourceError, DuplicateAssetError, EnumerationError

logger = logging.getLogger(__name__)

Record = TypeVar("Record")

StaticAssets = Union[
    Iterable[Asset], Callable[[Sequence[Record]], Iterable[Asset]]
]


def check_unique(assets: Iterable[Asset]) -> None:
    """Ensure no two assets share a logical path.

    Raises:
        DuplicateAssetError: On the first collision found.
    """
    seen: set[PurePosixPath] = set()
    for asset in assets:
        if asset.path in seen:
            raise DuplicateAssetError(asset.path)
        seen.add(asset.path)


async def fetch_records(
    fetch: Callable[[], Awaitable[Sequence[Record]]],
) -> tuple[Record, ...]:
    """Await the data source, wrapping any failure in DataSourceError."""
    try:
        records = await fetch()
    except EnumerationError:
        raise
    except Exception as exc:
        raise DataSourceError(f"Fetching records failed: {exc}") from exc
    return tuple(records)


async def enumerate_assets(
    fetch: Callable[[], Awaitable[Sequence[Record]]],
    derive: Callable[[Record], Asset],
    static: StaticAssets = (),
) -> list[Asset]:
    """Build the complete, ordered asset list.

    Args:
        fetch: Coroutine function returning every record, in a stable order.
        derive: Maps one record to exactly one asset.
        static: Assets known without the data source, or a callable building
            them from the fetched records (for listing pages).

    Returns:
        The static assets followed by one asset per record.

    Raises:
        DataSourceError: If fetching records fails.
        DuplicateAssetError: If two assets share a logical path.
    """
    records = await fetch_records(fetch)
    if not records:
        logger.info("Data source returned no records")

    assets = list(static(records) if callable(static) else static)
    assets.extend(derive(record) for record in records)
    check_unique(assets)
    logger.debug(
        "Enumerated %d assets (%d from records)", len(assets), len(records)
    )
    return assets
