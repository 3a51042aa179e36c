"""
Export Driver
=============

Render the served diagram in the format implied by the output file name and
write it to disk.
"""

from pathlib import Path
from typing import Optional, Union

from mermaid_cli.config.logging import get_logger
from mermaid_cli.core.rendering.orchestrator import RenderOrchestrator, render_to_image
from mermaid_cli.models.schemas import ImageFormat

logger = get_logger(__name__)


class ExportError(Exception):
    """Exception raised when the rendered image cannot be saved."""

    pass


async def export_diagram(
    output: Union[str, Path],
    width: int,
    height: int,
    port: int,
    orchestrator: Optional[RenderOrchestrator] = None,
) -> str:
    """
    Export the diagram served on ``port`` to ``output``.

    Args:
        output: Output file; a ``.svg`` extension selects SVG, anything else PNG
        width: Viewport width in pixels
        height: Maximum image height in pixels
        port: Asset server port
        orchestrator: Orchestrator to render with, a default one when omitted

    Returns:
        Canonical absolute path of the written file

    Raises:
        RenderError: If rendering fails
        ExportError: If writing or resolving the file fails
    """
    path = Path(output)
    image_format = ImageFormat.from_path(path)
    image = await render_to_image(width, height, image_format, port, orchestrator=orchestrator)

    try:
        path.write_bytes(image)
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e

    try:
        resolved = path.resolve(strict=True)
    except OSError as e:
        raise ExportError(f"Failed to resolve {path}: {e}") from e

    logger.info("Diagram exported", path=str(resolved), format=image_format.value, size=len(image))
    return str(resolved)
