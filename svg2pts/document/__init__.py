"""
SVG document adapter.

Parses an SVG document, filters invisible shapes, resolves transforms and
converts all geometry to absolute move/line/cubic/close segments.
"""

from svg2pts.document.svg import Document, DocumentError, load_document

__all__ = ["Document", "DocumentError", "load_document"]
