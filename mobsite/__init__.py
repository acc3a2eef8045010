"""Mobsite static site builder.

This package builds the website of a mob programming community: a calendar
of every mob's sessions, a join page, and one page per mob, generated from
YAML records.

Every output is declared as an asset first. Once all assets are known, a
target table maps each one to its final path, and only then is content
produced, so any page can link to any other output by its final location.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
