"""Target table for Mobsite.

Every asset is declared under a logical path. Once all assets are known, the
target table maps each logical path to the final path its output is written
to, and computes links between outputs relative to the page that embeds them.

Key items:
- logical_path: Build a validated logical path from segments.
- TargetTable: Immutable mapping from logical path to final path.
- Targets: View of the table bound to the asset currently being rendered.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Iterator, Mapping
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from .exceptions import DuplicateAssetError, TableLookupError

if TYPE_CHECKING:
    from .assets import Asset


def logical_path(*segments: str | PurePosixPath) -> PurePosixPath:
    """Build a logical path from one or more segments.

    Args:
        *segments: Path segments, e.g. ``("mobs", "alpha.html")``.

    Returns:
        The joined relative POSIX path.

    Raises:
        ValueError: If the path is empty, absolute or escapes the site root.

    Examples:
        >>> logical_path("mobs", "alpha.html")
        PurePosixPath('mobs/alpha.html')
    """
    path = PurePosixPath(*segments)
    if path.is_absolute():
        raise ValueError(f"Logical path must be relative: {path}")
    if not path.parts or path == PurePosixPath("."):
        raise ValueError("Logical path must not be empty")
    if ".." in path.parts:
        raise ValueError(f"Logical path must stay inside the site root: {path}")
    return path


_MISSING = object()


def _normalize_root(root: str | PurePosixPath) -> PurePosixPath:
    text = str(root).strip("/")
    if not text:
        return PurePosixPath()
    return logical_path(text)


class TargetTable(Mapping[PurePosixPath, PurePosixPath]):
    """Immutable mapping from logical path to final output path.

    The final path is a pure function of the logical path (the logical path
    under a common root), so the table is identical across runs for the same
    asset list. Iteration follows declaration order.

    Attributes:
        root: Common prefix of every final path.
    """

    def __init__(
        self, paths: Iterable[str | PurePosixPath], root: str | PurePosixPath = ""
    ):
        """Build the table.

        Args:
            paths: Logical paths of every declared asset.
            root: Optional prefix applied to each final path.

        Raises:
            DuplicateAssetError: If a logical path appears more than once.
        """
        self.root = _normalize_root(root)
        targets: dict[PurePosixPath, PurePosixPath] = {}
        for raw in paths:
            path = logical_path(raw)
            if path in targets:
                raise DuplicateAssetError(path)
            targets[path] = self.root / path
        self._targets = targets

    @classmethod
    def from_paths(
        cls, paths: Iterable[str | PurePosixPath], root: str | PurePosixPath = ""
    ) -> TargetTable:
        return cls(paths, root=root)

    @classmethod
    def from_assets(
        cls, assets: Iterable[Asset], root: str | PurePosixPath = ""
    ) -> TargetTable:
        return cls((asset.path for asset in assets), root=root)

    def get(self, path: str | PurePosixPath, default: Any = _MISSING) -> Any:
        """Return the final path of a declared asset.

        Args:
            path: Logical path of the asset.
            default: Returned for undeclared paths instead of raising.

        Returns:
            The final output path.

        Raises:
            TableLookupError: If no asset was declared at the path and no
                default was given.
        """
        key = PurePosixPath(path)
        try:
            return self._targets[key]
        except KeyError:
            if default is not _MISSING:
                return default
            raise TableLookupError(key) from None

    def __getitem__(self, path: str | PurePosixPath) -> PurePosixPath:
        return self.get(path)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, PurePosixPath)):
            return False
        return PurePosixPath(path) in self._targets

    def __iter__(self) -> Iterator[PurePosixPath]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def relative(
        self, from_path: str | PurePosixPath, to_path: str | PurePosixPath
    ) -> PurePosixPath:
        """Compute the link from one output to another.

        Following the returned path from the directory holding the final
        output of ``from_path`` reaches the final output of ``to_path``.

        Args:
            from_path: Logical path of the output containing the link.
            to_path: Logical path of the output being linked to.

        Returns:
            Relative POSIX path.

        Raises:
            TableLookupError: If either path was never declared.

        Examples:
            >>> table = TargetTable(["index.html", "mobs/a.html"])
            >>> table.relative("mobs/a.html", "index.html")
            PurePosixPath('../index.html')
        """
        source = self.get(from_path)
        target = self.get(to_path)
        start = source.parent.as_posix()
        return PurePosixPath(posixpath.relpath(target.as_posix(), start))

    def for_asset(self, path: str | PurePosixPath) -> Targets:
        """Return a view of the table bound to one declared asset."""
        return Targets(self, logical_path(path))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TargetTable({len(self._targets)} targets, root={self.root!s})"


class Targets:
    """Target table as seen from the asset currently being rendered.

    Table-aware content operations receive this view, so links are always
    computed relative to the output that contains them.

    Attributes:
        table: The shared, read-only target table.
        path: Logical path of the asset being rendered.
    """

    def __init__(self, table: TargetTable, path: PurePosixPath):
        self.table = table
        self.path = path

    @property
    def final_path(self) -> PurePosixPath:
        return self.table.get(self.path)

    def relative(self, to_path: str | PurePosixPath) -> str:
        """Return the link from the current asset to another one as a string.

        Raises:
            TableLookupError: If ``to_path`` was never declared. The error is
                attributed to the current asset.
        """
        try:
            return self.table.relative(self.path, to_path).as_posix()
        except TableLookupError as exc:
            raise TableLookupError(exc.missing, self.path) from None

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Targets({self.path})"
