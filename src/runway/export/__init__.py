"""Markdown export of a quick-start guide.

Typical usage::

    from runway.export import export_filename, write_markdown

    path = write_markdown(quick_start, export_filename(quick_start.spec))
"""

from runway.export.markdown import export_filename, render_markdown, write_markdown

__all__ = ["export_filename", "render_markdown", "write_markdown"]
