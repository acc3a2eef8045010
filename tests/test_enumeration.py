import asyncio
from pathlib import PurePosixPath

import pytest

from mobsite.assets import Asset, PlainSource, TableSource, bytes_asset
from mobsite.enumeration import check_unique, enumerate_assets
from mobsite.exceptions import DataSourceError, DuplicateAssetError, TableLookupError
from mobsite.resolver import resolve
from mobsite.targets import TargetTable, logical_path


def static_assets():
    return [bytes_asset("index.html", b"index"), bytes_asset("join.html", b"join")]


def entity_page(record):
    def render(targets):
        return f"<a href='{targets.relative('index.html')}'>{record['title']}</a>"

    return Asset(logical_path("entities", f"{record['id']}.html"), TableSource(render))


def fetcher(records):
    async def fetch():
        await asyncio.sleep(0)
        return records

    return fetch


def test_records_and_static_assets_are_concatenated_in_order():
    records = [{"id": "a", "title": "Alpha"}, {"id": "b", "title": "Beta"}]
    assets = asyncio.run(enumerate_assets(fetcher(records), entity_page, static_assets()))
    assert [a.path.as_posix() for a in assets] == [
        "index.html",
        "join.html",
        "entities/a.html",
        "entities/b.html",
    ]
    table = TargetTable.from_assets(assets)
    assert table.relative("entities/a.html", "index.html") == PurePosixPath("../index.html")


@pytest.mark.parametrize("count", [0, 1, 7])
def test_enumeration_yields_n_plus_k_distinct_assets(count):
    records = [{"id": f"r{i}", "title": f"Record {i}"} for i in range(count)]
    assets = asyncio.run(enumerate_assets(fetcher(records), entity_page, static_assets()))
    assert len(assets) == count + 2
    assert len({a.path for a in assets}) == count + 2


def test_zero_records_builds_static_assets_only():
    assets = asyncio.run(enumerate_assets(fetcher([]), entity_page, static_assets()))
    assert [a.path.as_posix() for a in assets] == ["index.html", "join.html"]
    table = TargetTable.from_assets(assets)
    report = asyncio.run(resolve(assets, table))
    assert report.ok
    assert not any(isinstance(o.error, TableLookupError) for o in report)


def test_duplicate_record_ids_fail_enumeration():
    records = [{"id": "a", "title": "Alpha"}, {"id": "a", "title": "Again"}]
    with pytest.raises(DuplicateAssetError) as excinfo:
        asyncio.run(enumerate_assets(fetcher(records), entity_page, static_assets()))
    assert excinfo.value.path == PurePosixPath("entities/a.html")


def test_record_colliding_with_static_asset_fails():
    def derive(record):
        return bytes_asset(f"{record['id']}.html", b"")

    with pytest.raises(DuplicateAssetError):
        asyncio.run(enumerate_assets(fetcher([{"id": "join"}]), derive, static_assets()))


def test_fetch_failure_is_an_enumeration_error():
    async def fetch():
        raise ConnectionError("unreachable")

    with pytest.raises(DataSourceError) as excinfo:
        asyncio.run(enumerate_assets(fetch, entity_page, static_assets()))
    assert "unreachable" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_static_callable_receives_records():
    records = [{"id": "a", "title": "Alpha"}]
    seen = []

    def static(fetched):
        seen.append(fetched)
        return [bytes_asset("index.html", str(len(fetched)).encode())]

    assets = asyncio.run(enumerate_assets(fetcher(records), entity_page, static))
    assert seen == [tuple(records)]
    assert [a.path.as_posix() for a in assets] == ["index.html", "entities/a.html"]


def test_content_operations_do_not_run_during_enumeration():
    calls = []

    def derive(record):
        return Asset(logical_path(record["id"]), PlainSource(lambda: calls.append(1) or b""))

    asyncio.run(enumerate_assets(fetcher([{"id": "x.txt"}]), derive))
    assert calls == []


def test_check_unique_accepts_distinct_paths():
    check_unique(static_assets())
    with pytest.raises(DuplicateAssetError):
        check_unique(static_assets() + static_assets())
