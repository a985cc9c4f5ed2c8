"""SVG document loading -- bytes to visible absolute paths.

Walks the element tree in document order and returns, for every shape
that has a visible stroke or fill, its segments in absolute document
coordinates (all ancestor and own ``transform`` attributes applied).

Visibility:
    ``fill`` defaults to black and ``stroke`` to none, both inherited.
    A shape whose resolved fill **and** stroke are ``none`` is dropped.
    ``display:none`` drops the element and its subtree.  Non-rendered
    containers (``defs``, ``clipPath``, ``mask``, ...) are skipped.

Page height:
    ``viewBox`` height, else the ``height`` attribute (units ignored),
    else 100.  Used by the output sink for the Y flip.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from svgpathtools import parse_path
from svgpathtools.svg_to_paths import (
    ellipse2pathd,
    polygon2pathd,
    polyline2pathd,
    rect2pathd,
)

from svg2pts.document.convert import svgpath_to_segments
from svg2pts.document.transforms import IDENTITY, parse_numbers, parse_transform
from svg2pts.geometry.types import Path

logger = logging.getLogger(__name__)

DEFAULT_PAGE_HEIGHT = 100.0

SKIPPED_TAGS = frozenset({
    "defs", "clipPath", "mask", "marker", "pattern", "symbol",
    "metadata", "title", "desc", "style", "script",
    "linearGradient", "radialGradient", "filter",
})

SHAPE_TAGS = frozenset({
    "path", "rect", "circle", "ellipse", "line", "polyline", "polygon",
})

INHERITED = ("fill", "stroke")

LENGTH_ATTRS = ("x", "y", "width", "height", "rx", "ry", "r", "cx", "cy", "x1", "y1", "x2", "y2")


class DocumentError(Exception):
    """Raised when the input cannot be read as an SVG document."""

    pass


@dataclass(frozen=True)
class Document:
    """Visible geometry of one SVG document.

    Attributes
    ----------
    paths : list[Path]
        One segment list per visible shape, in document order.
    page_height : float
        Viewport height used for the output Y flip.
    """

    paths: list[Path] = field(default_factory=list)
    page_height: float = DEFAULT_PAGE_HEIGHT

    @property
    def segment_count(self) -> int:
        return sum(len(p) for p in self.paths)


# ---------------------------------------------------------------------------
# Attribute helpers
# ---------------------------------------------------------------------------


def _local(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _presentation(elem: ET.Element) -> dict[str, str]:
    """Presentation attributes, with ``style`` declarations taking precedence."""
    props = {
        k: elem.attrib[k].strip()
        for k in ("fill", "stroke", "display")
        if k in elem.attrib
    }
    for decl in elem.attrib.get("style", "").split(";"):
        if ":" not in decl:
            continue
        key, value = decl.split(":", 1)
        key = key.strip()
        if key in ("fill", "stroke", "display"):
            props[key] = value.strip()
    return props


def _is_none(paint: str) -> bool:
    return paint.strip().lower() == "none"


def page_height(root: ET.Element) -> float:
    """Resolve the viewport height of the root ``<svg>`` element."""
    view_box = root.attrib.get("viewBox")
    if view_box:
        nums = parse_numbers(view_box)
        if len(nums) == 4 and nums[3] > 0:
            return nums[3]
        logger.debug("Ignoring invalid viewBox %r", view_box)
    height = root.attrib.get("height")
    if height:
        nums = parse_numbers(height)
        if nums and nums[0] > 0 and not height.strip().endswith("%"):
            return nums[0]
    return DEFAULT_PAGE_HEIGHT


def _strip_units(attrib: dict[str, str]) -> dict[str, str]:
    """Reduce length attributes to their leading number (``5px`` -> ``5``)."""
    out = dict(attrib)
    for key in LENGTH_ATTRS:
        if key not in out:
            continue
        if out[key].strip() == "auto":
            del out[key]
            continue
        nums = parse_numbers(out[key])
        if not nums:
            raise ValueError(f"invalid length {key}={out[key]!r}")
        out[key] = repr(nums[0])
    return out


def shape_to_d(tag: str, attrib: dict[str, str]) -> str | None:
    """Path data for a basic shape, or ``None`` if it renders nothing.

    Length attributes may carry a unit suffix; the unit is ignored.
    """
    if tag == "path":
        return attrib.get("d")
    attrib = _strip_units(attrib)
    if tag == "rect":
        if float(attrib.get("width", 0)) <= 0 or float(attrib.get("height", 0)) <= 0:
            return None
        return rect2pathd(attrib)
    if tag in ("circle", "ellipse"):
        if tag == "circle":
            if float(attrib.get("r", 0)) <= 0:
                return None
        elif float(attrib.get("rx", 0)) <= 0 or float(attrib.get("ry", 0)) <= 0:
            return None
        return ellipse2pathd(attrib)
    if tag == "line":
        return (
            f"M{attrib.get('x1', '0')},{attrib.get('y1', '0')} "
            f"L{attrib.get('x2', '0')},{attrib.get('y2', '0')}"
        )
    if tag in ("polyline", "polygon"):
        if len(parse_numbers(attrib.get("points", ""))) < 4:
            return None
        if tag == "polygon":
            return polygon2pathd(attrib)
        return polyline2pathd(attrib)
    return None


# ---------------------------------------------------------------------------
# Tree walk
# ---------------------------------------------------------------------------


def _walk(
    elem: ET.Element,
    parent_mat: np.ndarray,
    inherited: dict[str, str],
) -> Iterator[Path]:
    tag = _local(elem.tag)
    if tag in SKIPPED_TAGS:
        return

    props = _presentation(elem)
    if props.get("display", "").lower() == "none":
        return

    style = dict(inherited)
    for key in INHERITED:
        value = props.get(key)
        if value and value.lower() != "inherit":
            style[key] = value

    try:
        mat = parent_mat @ parse_transform(elem.attrib.get("transform"))
    except ValueError as e:
        raise DocumentError(f"<{tag}>: {e}") from e

    if tag in SHAPE_TAGS:
        if _is_none(style["fill"]) and _is_none(style["stroke"]):
            logger.debug("Skipping <%s> with no fill or stroke", tag)
            return
        try:
            d = shape_to_d(tag, dict(elem.attrib))
            if not d:
                return
            segments = svgpath_to_segments(parse_path(d), mat)
        except (ValueError, IndexError, TypeError, KeyError) as e:
            raise DocumentError(f"Invalid <{tag}> geometry: {e}") from e
        if segments:
            yield segments
        return

    for child in elem:
        yield from _walk(child, mat, style)


def load_document(data: bytes | str) -> Document:
    """Parse SVG text into visible absolute paths.

    Parameters
    ----------
    data : bytes | str
        Complete SVG document.

    Returns
    -------
    Document
        Visible paths and page height.

    Raises
    ------
    DocumentError
        If the XML is malformed, the root is not ``<svg>``, or any
        geometry or transform attribute is invalid.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise DocumentError(f"Unable to parse SVG: {e}") from e

    if _local(root.tag) != "svg":
        raise DocumentError(f"Root element is <{_local(root.tag)}>, expected <svg>")

    height = page_height(root)
    paths = list(_walk(root, IDENTITY, {"fill": "black", "stroke": "none"}))
    doc = Document(paths=paths, page_height=height)
    logger.info(
        "Loaded SVG: %d visible paths, %d segments, page height %g",
        len(doc.paths), doc.segment_count, doc.page_height,
    )
    return doc
