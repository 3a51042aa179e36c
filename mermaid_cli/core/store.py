"""
Resource Store
==============

Assemble the resources served to the browser from the packaged defaults,
user supplied override files and the diagram source.
"""

import sys
from pathlib import Path
from typing import BinaryIO, Optional, Union

from mermaid_cli.assets import DefaultAssets, load_default_assets
from mermaid_cli.config.logging import get_logger
from mermaid_cli.models.schemas import ResourceStore

logger = get_logger(__name__)

STDIN_SENTINEL = "-"

PathLike = Union[str, Path]


class DiagramReadError(Exception):
    """Exception raised when the diagram source cannot be read."""

    pass


def read_or_default(path: Optional[PathLike], default: bytes) -> bytes:
    """
    Read an override file, falling back to ``default``.

    A missing path or an unreadable file both yield the default; the failure
    is only logged.
    """
    if path is None:
        return default
    try:
        return Path(path).read_bytes()
    except OSError as e:
        logger.warning("Override not readable, using default", path=str(path), error=str(e))
        return default


def read_diagram(path: PathLike, stdin: Optional[BinaryIO] = None) -> bytes:
    """
    Read the diagram source.

    Args:
        path: Diagram file, or ``-`` for standard input
        stdin: Binary stream used for ``-``, defaults to ``sys.stdin.buffer``

    Returns:
        The diagram bytes exactly as read

    Raises:
        DiagramReadError: If the source cannot be read or is not UTF-8
    """
    if str(path) == STDIN_SENTINEL:
        stream = stdin if stdin is not None else sys.stdin.buffer
        try:
            data = stream.read()
        except OSError as e:
            raise DiagramReadError(f"Failed to read diagram from stdin: {e}") from e
        source = "stdin"
    else:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise DiagramReadError(f"Failed to read input file {path}: {e}") from e
        source = str(path)

    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DiagramReadError(f"Diagram from {source} is not valid UTF-8: {e}") from e

    logger.debug("Diagram read", source=source, size=len(data))
    return data


def build_store(
    diagram_path: PathLike,
    font_path: Optional[PathLike] = None,
    style_path: Optional[PathLike] = None,
    config_path: Optional[PathLike] = None,
    defaults: Optional[DefaultAssets] = None,
    stdin: Optional[BinaryIO] = None,
) -> ResourceStore:
    """
    Build the resource store for one conversion.

    Args:
        diagram_path: Diagram file, or ``-`` for standard input
        font_path: Optional font override
        style_path: Optional stylesheet override
        config_path: Optional Mermaid configuration override
        defaults: Default assets, loaded from the package when omitted
        stdin: Binary stream used when ``diagram_path`` is ``-``

    Returns:
        ResourceStore holding every resource

    Raises:
        DiagramReadError: If the diagram cannot be read
        AssetNotFoundError: If a default asset is missing
    """
    diagram = read_diagram(diagram_path, stdin=stdin)
    if defaults is None:
        defaults = load_default_assets()

    store = ResourceStore(
        font=read_or_default(font_path, defaults.font),
        style=read_or_default(style_path, defaults.style),
        config=read_or_default(config_path, defaults.config),
        diagram=diagram,
        render_library=defaults.mermaid_js,
    )
    logger.info(
        "Resource store built",
        diagram_size=len(store.diagram),
        font_override=font_path is not None,
        style_override=style_path is not None,
        config_override=config_path is not None,
    )
    return store
