"""Filesystem helpers: YAML loading and input/output stream selection.

Provides:
    - YAML load with safe_load
    - Directory creation with exist_ok semantics
    - Input bytes from a file or stdin
    - Output byte stream to a file or stdout

All paths use pathlib.Path.  ``None`` or ``"-"`` selects the standard
stream for both input and output.

Note: Module named ``fs.py`` to avoid shadowing stdlib ``io``.
"""

from __future__ import annotations

import contextlib
import sys
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, Optional, Union

import yaml

STDIO = "-"


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails

    Notes
    -----
    Uses safe_load to prevent arbitrary code execution.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def is_stdio(path: Optional[Union[str, Path]]) -> bool:
    return path is None or str(path) == STDIO


def read_input(path: Optional[Union[str, Path]] = None) -> bytes:
    """Read a whole input document.

    Parameters
    ----------
    path : str | Path | None
        File to read; ``None`` or ``"-"`` reads standard input.

    Returns
    -------
    bytes
        Raw document bytes.

    Raises
    ------
    OSError
        If the file cannot be opened or read.
    """
    if is_stdio(path):
        return sys.stdin.buffer.read()
    with open(path, 'rb') as f:
        return f.read()


@contextlib.contextmanager
def open_output(path: Optional[Union[str, Path]] = None) -> Iterator[BinaryIO]:
    """Open the output byte stream.

    Standard output is yielded as its binary buffer and left open.

    Raises
    ------
    OSError
        If the output file cannot be created.
    """
    if is_stdio(path):
        yield sys.stdout.buffer
        return
    with open(path, 'wb') as f:
        yield f
