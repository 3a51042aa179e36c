"""
Command Line Interface
======================

Convert a Mermaid diagram to PNG or SVG, without external network access.

    mermaid-cli -i diagram.mmd -o diagram.png
    cat diagram.mmd | mermaid-cli -i - -o diagram.svg
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from mermaid_cli import __version__
from mermaid_cli.assets import AssetNotFoundError, DefaultAssets, load_default_html
from mermaid_cli.config.logging import get_logger, setup_logging
from mermaid_cli.config.settings import Settings, get_settings
from mermaid_cli.core.export import ExportError, export_diagram
from mermaid_cli.core.rendering.asset_server import AssetServer
from mermaid_cli.core.rendering.browser import BrowserDriver
from mermaid_cli.core.rendering.orchestrator import RenderError, RenderOrchestrator
from mermaid_cli.core.store import DiagramReadError, build_store

logger = get_logger(__name__)


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid positive integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value!r}")
    return number


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    """Create the argument parser, taking size defaults from ``settings``."""
    settings = settings or get_settings()
    parser = argparse.ArgumentParser(
        prog="mermaid-cli",
        description="Convert Mermaid diagram to PNG or SVG format, without external network access.",
    )
    parser.add_argument(
        "-i", "--input", dest="diagram", required=True,
        help="Path to the Mermaid diagram file. Specify `-` for stdin.",
    )
    parser.add_argument(
        "-o", "--output", required=True,
        help="Path to the output file. By default, the file format is PNG. "
        "Specify a `.svg` extension if you need an SVG file.",
    )
    parser.add_argument(
        "-w", "--width", type=positive_int, default=settings.default_width,
        help="Width of the output image in pixels (default: %(default)s).",
    )
    parser.add_argument(
        "-H", "--height", type=positive_int, default=settings.default_height,
        help="Height of the output image in pixels. This value is automatically "
        "reduced to fit the image (default: %(default)s).",
    )
    parser.add_argument(
        "-c", "--cssFile", dest="style", help="Path to a CSS file for the HTML page."
    )
    parser.add_argument(
        "-C", "--configFile", dest="config", help="Path to a JSON configuration file for Mermaid."
    )
    parser.add_argument("-f", "--font", help="Path to a font file for Mermaid.")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def convert(
    args: argparse.Namespace,
    defaults: Optional[DefaultAssets] = None,
    driver_factory: Optional[Callable[[], BrowserDriver]] = None,
) -> str:
    """
    Run one conversion described by parsed command line arguments.

    The asset server is bound before the orchestrator starts, and stopped once
    the image is written.

    Returns:
        Canonical absolute path of the written image
    """
    settings = get_settings()
    # The diagram is read before any default asset is loaded.
    store = build_store(
        args.diagram,
        font_path=args.font,
        style_path=args.style,
        config_path=args.config,
        defaults=defaults,
    )
    html = defaults.html if defaults is not None else load_default_html()

    async with AssetServer(store, html, host=settings.server_host) as server:
        return await export_diagram(
            Path(args.output),
            args.width,
            args.height,
            server.port,
            orchestrator=RenderOrchestrator(driver_factory=driver_factory),
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the converter."""
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"error: invalid settings: {e}", file=sys.stderr)
        return 1

    args = build_parser(settings).parse_args(argv)

    try:
        setup_logging()
        path = asyncio.run(convert(args))
    except KeyboardInterrupt:
        return 130
    except (DiagramReadError, AssetNotFoundError, RenderError, ExportError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error("Conversion aborted", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
