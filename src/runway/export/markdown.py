"""Render a :class:`~runway.models.QuickStart` as a Markdown document.

The document is produced from the ``guide.md.j2`` Jinja2 template in the
``templates/`` directory next to this module and has this outline:

* ``# <title> Quick Start`` and the API info block (version, base URL).
* ``## Step 1: Set up authentication`` -- only when credentials are needed.
* ``## Step N: Make your first request`` with one fenced block per snippet.
* ``## Other endpoints to try`` -- only when there are alternatives.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from runway.models import NormalizedSpec, QuickStart

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``export/templates/``)."""

GUIDE_TEMPLATE = "guide.md.j2"


def render_markdown(quick_start: QuickStart) -> str:
    """Return the Markdown text for *quick_start*."""
    template = _create_jinja_env().get_template(GUIDE_TEMPLATE)
    return template.render(
        spec=quick_start.spec,
        endpoint=quick_start.endpoint,
        base_url=quick_start.base_url,
        auth=quick_start.auth,
        snippets=quick_start.snippets,
        alternatives=quick_start.alternatives,
    )


def write_markdown(quick_start: QuickStart, path: str | Path) -> Path:
    """Render *quick_start* and write it to *path*, creating parent directories.

    Returns:
        The path written to.
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_markdown(quick_start), encoding="utf-8")
    logger.debug("Wrote Markdown guide to %s", output_path)
    return output_path


def export_filename(spec: NormalizedSpec) -> str:
    """Default file name for an exported guide.

    Example::

        >>> export_filename(NormalizedSpec(title="Pet Store API", version="1", servers=[...]))
        'pet-store-api-quickstart.md'
    """
    return re.sub(r"\s+", "-", spec.title.lower()) + "-quickstart.md"


def _create_jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("md.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
