import posixpath
from collections.abc import ItemsView, Mapping
from pathlib import PurePosixPath

import pytest

from mobsite.exceptions import ContentGenerationError, DuplicateAssetError, TableLookupError
from mobsite.targets import TargetTable, logical_path

PATHS = [
    "index.html",
    "join.html",
    "index.css",
    "fonts/vollkorn.ttf",
    "mobs/alpha.html",
    "mobs/beta.html",
]


def test_logical_path_joins_segments():
    assert logical_path("mobs", "alpha.html") == PurePosixPath("mobs/alpha.html")


@pytest.mark.parametrize("bad", ["", ".", "/index.html", "../index.html", "a/../../b"])
def test_logical_path_rejects_invalid(bad):
    with pytest.raises(ValueError):
        logical_path(bad)


def test_table_maps_every_declared_path():
    table = TargetTable.from_paths(PATHS)
    assert len(table) == len(PATHS)
    assert list(table) == [PurePosixPath(p) for p in PATHS]
    for path in PATHS:
        assert path in table
        assert table.get(path) == PurePosixPath(path)


def test_table_applies_root_prefix():
    table = TargetTable.from_paths(PATHS, root="/site/")
    assert table.get("mobs/alpha.html") == PurePosixPath("site/mobs/alpha.html")
    assert table["index.html"] == PurePosixPath("site/index.html")


def test_table_lookup_of_undeclared_path_fails():
    table = TargetTable.from_paths(PATHS)
    assert "missing.html" not in table
    with pytest.raises(TableLookupError) as excinfo:
        table.get("missing.html")
    assert excinfo.value.missing == PurePosixPath("missing.html")
    assert isinstance(excinfo.value, ContentGenerationError)
    assert "missing.html" in str(excinfo.value)


def test_table_is_a_read_only_mapping():
    table = TargetTable.from_paths(PATHS, root="site")
    assert isinstance(table, Mapping)
    assert isinstance(table.items(), ItemsView)
    assert list(table.keys()) == [PurePosixPath(p) for p in PATHS]
    assert PurePosixPath("site/index.html") in table.values()
    assert table == TargetTable.from_paths(PATHS, root="site")
    assert table != TargetTable.from_paths(PATHS)
    assert table.get("missing.html", None) is None
    with pytest.raises(TypeError):
        table["extra.html"] = PurePosixPath("extra.html")


def test_table_rejects_duplicate_paths():
    with pytest.raises(DuplicateAssetError) as excinfo:
        TargetTable.from_paths(["index.html", "join.html", "index.html"])
    assert excinfo.value.path == PurePosixPath("index.html")


def test_table_is_deterministic():
    first = TargetTable.from_paths(PATHS, root="out")
    second = TargetTable.from_paths(PATHS, root="out")
    assert list(first.items()) == list(second.items())


def test_relative_from_nested_page_to_root():
    table = TargetTable.from_paths(["index.html", "join.html", "entities/a.html", "entities/b.html"])
    assert table.relative("entities/a.html", "index.html") == PurePosixPath("../index.html")
    assert table.relative("entities/a.html", "entities/b.html") == PurePosixPath("b.html")
    assert table.relative("index.html", "entities/b.html") == PurePosixPath("entities/b.html")
    assert table.relative("index.html", "index.html") == PurePosixPath("index.html")


@pytest.mark.parametrize("root", ["", "site", "deploy/v2"])
def test_relative_round_trips_for_every_pair(root):
    table = TargetTable.from_paths(PATHS, root=root)
    for source in PATHS:
        for target in PATHS:
            rel = table.relative(source, target)
            joined = posixpath.join(table.get(source).parent.as_posix(), rel.as_posix())
            assert PurePosixPath(posixpath.normpath(joined)) == table.get(target)


def test_relative_to_undeclared_path_fails():
    table = TargetTable.from_paths(PATHS)
    with pytest.raises(TableLookupError):
        table.relative("index.html", "fullcalendar.js")
    with pytest.raises(TableLookupError):
        table.relative("nowhere.html", "index.html")


def test_targets_view_is_bound_to_current_asset():
    table = TargetTable.from_paths(PATHS, root="site")
    targets = table.for_asset("mobs/alpha.html")
    assert targets.path == PurePosixPath("mobs/alpha.html")
    assert targets.final_path == PurePosixPath("site/mobs/alpha.html")
    assert targets.relative("index.css") == "../index.css"
    assert targets.relative(PurePosixPath("fonts/vollkorn.ttf")) == "../fonts/vollkorn.ttf"


def test_targets_view_attributes_lookup_errors_to_current_asset():
    table = TargetTable.from_paths(PATHS)
    targets = table.for_asset("join.html")
    with pytest.raises(TableLookupError) as excinfo:
        targets.relative("fullcalendar.css")
    assert excinfo.value.path == PurePosixPath("join.html")
    assert excinfo.value.missing == PurePosixPath("fullcalendar.css")
