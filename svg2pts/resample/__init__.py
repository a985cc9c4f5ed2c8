"""
Distance resampling.

Turns absolute path segments into evenly spaced output points.  The
spacing strategy is an explicit policy object chosen once per run.
"""

from svg2pts.resample.policies import (
    EvenSplitPolicy,
    ExactPolicy,
    PassthroughPolicy,
    ResampleMode,
    ResamplePolicy,
    make_policy,
)
from svg2pts.resample.resampler import DistanceResampler, resample_segments

__all__ = [
    "DistanceResampler",
    "resample_segments",
    "ResampleMode",
    "ResamplePolicy",
    "PassthroughPolicy",
    "ExactPolicy",
    "EvenSplitPolicy",
    "make_policy",
]
