"""Configuration for Mobsite.

Site configuration lives in ``mobsite.yaml`` at the project root. Missing
keys fall back to DEFAULT_CONFIG.

Key items:
- load_config: Load configuration with defaults applied.
- validate_config: Reject settings the build cannot use.
- Site: Project layout plus the values templates need.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .targets import logical_path
from .templates import TemplateEngine

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "mobsite.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "output_dir": "output",
    "root": "",
    "jobs": None,
    "allow_partial": False,
    "data_dir": "data/mobs",
    "assets_dir": "assets",
    "name": "Mobus Operandi",
    "description": "A mob programming community",
    "zulip_url": "",
    "github_url": "",
    "twitter_url": "",
    "repo_url": "",
    "commit": None,
    "fonts": [],
}

# Keys exposed to templates as ``site``
_TEMPLATE_KEYS = (
    "name",
    "description",
    "zulip_url",
    "github_url",
    "twitter_url",
    "repo_url",
    "commit",
    "fonts",
)


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from mobsite.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
            else:
                logger.warning("Ignoring %s: expected a mapping", config_path)
    return config


def validate_config(config: dict[str, Any]) -> None:
    """Check the settings the build pipeline depends on.

    Raises:
        ConfigError: If ``jobs`` is not a positive integer or ``root`` does
            not name a directory inside the output.
    """
    jobs = config.get("jobs")
    if jobs is not None and (
        isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1
    ):
        raise ConfigError("jobs", f"expected a positive integer, got {jobs!r}")

    root = config.get("root") or ""
    if not isinstance(root, str):
        raise ConfigError("root", f"expected a path, got {root!r}")
    text = root.strip("/")
    if text:
        try:
            logical_path(text)
        except ValueError as exc:
            raise ConfigError("root", str(exc)) from None


def detect_commit(project_root: Path) -> str:
    """Return the current git commit of the project, or an empty string."""
    env_commit = os.environ.get("MOBSITE_COMMIT")
    if env_commit:
        return env_commit
    git_bin = shutil.which("git")
    if not git_bin:
        return ""
    try:
        completed = subprocess.run(
            [git_bin, "rev-parse", "HEAD"],
            cwd=project_root,
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        logger.debug("No git commit found for %s", project_root)
        return ""
    return completed.stdout.strip()


@dataclass
class Site:
    """A Mobsite project ready to build.

    Attributes:
        project_root: Root directory of the project.
        config: Configuration values, defaults applied.
        engine: Template engine shared by every page.
    """

    project_root: Path
    config: dict[str, Any]
    engine: TemplateEngine = field(init=False)

    def __post_init__(self) -> None:
        values = {key: self.config.get(key) for key in _TEMPLATE_KEYS}
        if values["commit"] is None:
            values["commit"] = detect_commit(self.project_root)
        values["fonts"] = list(values["fonts"] or [])
        self.engine = TemplateEngine(values, layouts_dir=self.layouts_dir)

    @classmethod
    def from_project(cls, project_root: Path, **overrides: Any) -> Site:
        """Load a site from its project directory.

        Args:
            project_root: Root directory of the project.
            **overrides: Configuration values that replace loaded ones when
                not None.

        Raises:
            ConfigError: If a setting is invalid.
        """
        config = load_config(project_root)
        config.update({k: v for k, v in overrides.items() if v is not None})
        validate_config(config)
        return cls(project_root, config)

    @property
    def output_dir(self) -> Path:
        return self.project_root / self.config["output_dir"]

    @property
    def data_dir(self) -> Path:
        return self.project_root / self.config["data_dir"]

    @property
    def assets_dir(self) -> Path:
        return self.project_root / self.config["assets_dir"]

    @property
    def layouts_dir(self) -> Path:
        return self.project_root / "_layouts"

    @property
    def join_copy_path(self) -> Path:
        return self.project_root / "join.md"
