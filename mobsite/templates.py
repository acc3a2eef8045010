"""Template rendering engine for Mobsite.

This module uses Jinja2 to render pages. Every page is rendered inside the
base layout, which links the navigation, icons, fonts and main stylesheet
through the target table of the page being rendered.

Key class:
- TemplateEngine: Loads templates and renders documents and partials.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from .html_utils import classes
from .targets import Targets

# Templates shipped with the package
_TEMPLATES_DIR = Path(__file__).parent / "templates"

MAIN_STYLESHEET = "index.css"
BASE_CONTENT_CLASSES = "grow flex flex-col justify-center"


def version_token() -> int:
    """Return the cache-busting token appended to the main stylesheet URL."""
    return int(time.time() * 1000)


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        site: Site-wide values exposed to every template (name, description,
            social URLs, fonts, commit).
        env: Jinja2 environment.
    """

    def __init__(self, site: dict[str, Any], layouts_dir: Path | None = None):
        """Initialize the template engine.

        Args:
            site: Site-wide template values.
            layouts_dir: Optional project directory whose templates take
                precedence over the packaged ones.
        """
        self.site = site
        search_path = [_TEMPLATES_DIR]
        if layouts_dir is not None and layouts_dir.is_dir():
            search_path.insert(0, layouts_dir)
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            undefined=StrictUndefined,
            enable_async=False,
        )
        self.env.globals["site"] = self.site
        self.env.globals["classes"] = classes

    def render_partial(self, name: str, **context: Any) -> Markup:
        """Render a template fragment.

        Args:
            name: Template name.
            **context: Variables made available to the template.

        Returns:
            Markup-safe rendered fragment.
        """
        return Markup(self.env.get_template(name).render(**context))

    def render_document(
        self,
        name: str,
        targets: Targets,
        title: str,
        stylesheets: Iterable[str] = (),
        content_classes: str = "",
        **context: Any,
    ) -> str:
        """Render a full HTML document inside the base layout.

        Args:
            name: Page template name; it extends ``base.html.jinja``.
            targets: Target table view of the page being rendered.
            title: Page title, shown before the site name.
            stylesheets: Extra stylesheet hrefs added to the head.
            content_classes: Classes for the main content container.
            **context: Variables for the page template.

        Returns:
            The rendered document.

        Raises:
            TableLookupError: If the page links an asset that is not built.
        """
        template = self.env.get_template(name)
        return template.render(
            title=title,
            relative=targets.relative,
            stylesheets=list(stylesheets),
            main_stylesheet=targets.relative(MAIN_STYLESHEET),
            version=version_token(),
            content_classes=classes(content_classes, BASE_CONTENT_CLASSES),
            fonts=[
                {"name": font["name"], "src": targets.relative(font["file"])}
                for font in self.site.get("fonts", [])
            ],
            **context,
        )
