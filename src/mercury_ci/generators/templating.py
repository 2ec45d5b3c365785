"""Jinja2 environment for Markdown templates."""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

DEFAULT_TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


def create_environment(template_dir: Optional[str] = None) -> Environment:
    """
    Create the template environment.

    Args:
        template_dir: Directory containing Jinja2 templates.
                      If not provided, uses the packaged templates.
    """
    return Environment(
        loader=FileSystemLoader(template_dir or DEFAULT_TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
