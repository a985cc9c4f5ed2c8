"""Conversion pipeline -- document paths to point text.

Wires the pieces together for one run::

    Document.paths --> DistanceResampler --> PointSink --> byte stream
                         (flattens curves,
                          applies policy)

When a point count is requested, a read-only length pass over the same
paths derives the spacing first.  The curve accuracy default depends on
the *resolved* spacing, so it is settled only after that pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterable

from svg2pts.configs.loader import ConversionConfig, resolve_accuracy
from svg2pts.document.svg import Document, load_document
from svg2pts.geometry.length import derive_distance
from svg2pts.geometry.types import Path
from svg2pts.output.point_sink import PointSink
from svg2pts.resample.policies import ResampleMode, make_policy
from svg2pts.resample.resampler import DistanceResampler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedSettings:
    """Per-run settings after resolving a config against a document."""

    target_distance: float
    accuracy: float
    page_height: float
    mode: ResampleMode


def resolve_settings(config: ConversionConfig, document: Document) -> ResolvedSettings:
    """Settle spacing and accuracy for *document*.

    ``config.points > 0`` replaces ``config.distance`` with
    ``estimated_length / points``.
    """
    distance = config.distance
    if config.points > 0:
        distance = derive_distance(document.paths, config.points, config.accuracy)
        if distance == 0.0:
            logger.info("Document has zero length; writing vertices unchanged")

    settings = ResolvedSettings(
        target_distance=distance,
        accuracy=resolve_accuracy(distance, config.accuracy),
        page_height=document.page_height,
        mode=config.mode,
    )
    logger.debug("Resolved settings: %s", settings)
    return settings


def write_paths(
    paths: Iterable[Path],
    settings: ResolvedSettings,
    sink: PointSink,
) -> int:
    """Resample *paths* into *sink*.

    Returns
    -------
    int
        Number of points emitted.
    """
    policy = make_policy(settings.target_distance, settings.mode)
    resampler = DistanceResampler(sink.write, policy)
    for path in paths:
        resampler.feed_all(path, settings.accuracy)
    logger.debug("Resampled with %r: %d points", policy, resampler.emitted)
    return resampler.emitted


def convert_document(
    document: Document,
    config: ConversionConfig,
    stream: BinaryIO,
) -> int:
    """Convert a loaded document and write its points to *stream*.

    The sink is finalized on the way out, including when an error
    unwinds the run, so everything emitted so far reaches *stream*.

    Returns
    -------
    int
        Number of points written.
    """
    settings = resolve_settings(config, document)
    with PointSink(stream, settings.page_height, config.buffer_size) as sink:
        count = write_paths(document.paths, settings, sink)
    logger.info(
        "Wrote %d points (distance=%g, accuracy=%g, mode=%s)",
        count, settings.target_distance, settings.accuracy, settings.mode.value,
    )
    return count


def convert(data: bytes | str, config: ConversionConfig, stream: BinaryIO) -> int:
    """Parse SVG *data* and write its points to *stream*.

    Raises
    ------
    DocumentError
        If *data* is not a readable SVG document.
    OSError
        If writing to *stream* fails.
    """
    return convert_document(load_document(data), config, stream)
