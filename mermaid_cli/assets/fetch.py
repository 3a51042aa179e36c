"""
Asset Fetcher
=============

Download the third-party assets that are not kept in the source tree:
the Mermaid.js bundle and the default font.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional

import aiohttp

from mermaid_cli.assets import DOWNLOADED_ASSETS, package_assets_dir
from mermaid_cli.config.logging import get_logger, setup_logging

logger = get_logger(__name__)


class AssetFetchError(Exception):
    """Exception raised when downloading an asset fails."""

    pass


async def _download(session: aiohttp.ClientSession, url: str, target: Path) -> int:
    try:
        async with session.get(url) as response:
            response.raise_for_status()
            blob = await response.read()
    except aiohttp.ClientError as e:
        raise AssetFetchError(f"Failed to download {url}: {e}") from e

    try:
        target.write_bytes(blob)
    except OSError as e:
        raise AssetFetchError(f"Failed to write {target}: {e}") from e
    return len(blob)


async def fetch_assets(
    dest: Path, force: bool = False, assets: Optional[Dict[str, str]] = None
) -> List[Path]:
    """
    Download missing assets into ``dest``.

    Args:
        dest: Target directory, created when missing
        force: Download even when the file already exists
        assets: Mapping of file name to URL, defaults to DOWNLOADED_ASSETS

    Returns:
        Paths of the files that were written

    Raises:
        AssetFetchError: If any download or write fails
    """
    assets = DOWNLOADED_ASSETS if assets is None else assets
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise AssetFetchError(f"Failed to create {dest}: {e}") from e
    written: List[Path] = []

    timeout = aiohttp.ClientTimeout(total=300, connect=30)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        for name, url in assets.items():
            target = dest / name
            if target.exists() and not force:
                logger.info("Asset already present", asset=name)
                continue

            size = await _download(session, url, target)
            logger.info("Asset downloaded", asset=name, size=size)
            written.append(target)

    return written


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mermaid-cli-fetch-assets",
        description="Download the Mermaid.js bundle and default font.",
    )
    parser.add_argument(
        "--dest", type=Path, default=package_assets_dir(), help="Target directory"
    )
    parser.add_argument("--force", action="store_true", help="Download existing files again")
    args = parser.parse_args(argv)

    setup_logging()
    try:
        written = asyncio.run(fetch_assets(args.dest, force=args.force))
    except AssetFetchError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
