from pathlib import Path

import pytest
from jinja2 import UndefinedError

from mobsite.html_utils import classes, escape_html
from mobsite.renderers import markdown_to_html
from mobsite.targets import TargetTable
from mobsite.templates import TemplateEngine, version_token
from mobsite.utils import ensure_clean_dir, slugify

SITE = {
    "name": "Mobs",
    "description": "Desc",
    "zulip_url": "",
    "github_url": "",
    "twitter_url": "",
    "repo_url": "https://example.com/repo",
    "commit": "deadbeef",
    "fonts": [],
}


def test_escape_html():
    assert escape_html('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"


def test_classes_drops_repeats_and_empty_groups():
    assert classes("flex gap-6", None, "", "flex grow") == "flex gap-6 grow"


def test_slugify():
    assert slugify("Rust Mob (Evenings)") == "rust-mob-evenings"
    assert slugify("a") == "a"
    assert slugify("!!!") == ""


def test_ensure_clean_dir(tmp_path):
    target = tmp_path / "out"
    (target / "nested").mkdir(parents=True)
    (target / "nested" / "file.txt").write_text("x", encoding="utf-8")
    ensure_clean_dir(target)
    assert target.exists()
    assert list(target.iterdir()) == []


def test_markdown_to_html_headings_and_code():
    html = markdown_to_html("# Hello\n\n# Hello\n\n```python\nx = 1 < 2\n```\n")
    assert '<h1 id="hello">Hello</h1>' in html
    assert '<h1 id="hello-1">Hello</h1>' in html
    assert '<code class="language-python">x = 1 &lt; 2' in html


def test_render_document_links_relative_to_page():
    table = TargetTable.from_paths(["index.html", "join.html", "index.css", "deep/er/page.html"])
    engine = TemplateEngine(SITE)
    html = engine.render_document(
        "join.html.jinja", table.for_asset("deep/er/page.html"), title="Page", copy="<p>hi</p>"
    )
    assert 'href="../../index.html"' in html
    assert 'href="../../join.html"' in html
    assert 'href="../../index.css?v=' in html
    assert "&lt;p&gt;hi&lt;/p&gt;" in html
    assert 'href="https://example.com/repo"' in html
    assert "deadbeef" in html


def test_layout_override_directory_takes_precedence(tmp_path):
    layouts = tmp_path / "_layouts"
    layouts.mkdir()
    (layouts / "join.html.jinja").write_text("custom {{ title }}", encoding="utf-8")
    table = TargetTable.from_paths(["join.html", "index.css"])
    engine = TemplateEngine(SITE, layouts_dir=layouts)
    html = engine.render_document(
        "join.html.jinja", table.for_asset("join.html"), title="Join", copy=""
    )
    assert html == "custom Join"


def test_missing_template_variable_is_an_error():
    engine = TemplateEngine({})
    table = TargetTable.from_paths(["index.html", "join.html", "index.css"])
    with pytest.raises(UndefinedError):
        engine.render_document("join.html.jinja", table.for_asset("index.html"), title="x", copy="")


def test_version_token_is_epoch_millis():
    assert version_token() > 1_600_000_000_000
