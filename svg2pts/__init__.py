"""svg2pts: convert SVG paths to evenly spaced point lists.

Reads an SVG document, keeps every shape with a visible stroke or fill,
flattens its curves and writes one ``X Y`` line per point, optionally
resampled at a fixed spacing or to an approximate point count.

Architecture layers (strict one-way dependency):
    cli -> pipeline -> {document, resample, output, configs} -> geometry -> utils

Key invariants:
    - Coordinates are absolute document units end to end
    - Output Y is flipped: ``page_height - y``
    - Every subpath start is emitted, whatever the spacing
    - Numerical dead ends in resampling are skipped, never raised
"""

__version__ = "0.2.0"

__all__ = ["configs", "document", "geometry", "output", "resample", "utils"]
