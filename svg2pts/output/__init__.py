"""Point serialization -- buffered ``"<x> <y>\\n"`` text output."""

from svg2pts.output.point_sink import PointSink, format_coord

__all__ = ["PointSink", "format_coord"]
