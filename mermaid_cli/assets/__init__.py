"""
Default Assets
==============

Packaged defaults for everything the HTML page loads from the asset server.

Files:
- index.html: HTML shell that renders the diagram with Mermaid.js
- style.css: Default stylesheet
- config.json: Default Mermaid configuration
- SourceHanSansJP-VF.otf.woff2: Default font (downloaded, see fetch.py)
- mermaid.min.js: Mermaid.js bundle (downloaded, see fetch.py)
"""

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Optional

from mermaid_cli.config.logging import get_logger
from mermaid_cli.config.settings import get_settings

logger = get_logger(__name__)

HTML_FILE = "index.html"
FONT_FILE = "SourceHanSansJP-VF.otf.woff2"
STYLE_FILE = "style.css"
CONFIG_FILE = "config.json"
MERMAID_JS_FILE = "mermaid.min.js"

# Assets too large to keep in the source tree
DOWNLOADED_ASSETS = {
    FONT_FILE: (
        "https://github.com/adobe-fonts/source-han-sans/raw/release/"
        "Variable/WOFF2/OTF/Subset/SourceHanSansJP-VF.otf.woff2"
    ),
    MERMAID_JS_FILE: "https://cdn.jsdelivr.net/npm/mermaid@10.6.1/dist/mermaid.min.js",
}


class AssetNotFoundError(Exception):
    """Exception raised when a default asset is missing."""

    pass


@dataclass(frozen=True)
class DefaultAssets:
    """Default bytes used when no override is supplied."""

    html: bytes
    font: bytes
    style: bytes
    config: bytes
    mermaid_js: bytes


def package_assets_dir() -> Path:
    """Directory holding the assets shipped with the package."""
    return Path(str(resources.files(__name__)))


def _read_asset(name: str, directory: Optional[Path]) -> bytes:
    if directory is not None and (directory / name).is_file():
        return (directory / name).read_bytes()

    resource = resources.files(__name__).joinpath(name)
    if not resource.is_file():
        hint = " Run `mermaid-cli-fetch-assets` to download it." if name in DOWNLOADED_ASSETS else ""
        raise AssetNotFoundError(f"Default asset {name!r} is missing.{hint}")
    return resource.read_bytes()


def load_default_html(directory: Optional[Path] = None) -> bytes:
    """Load the HTML shell, looking in ``directory`` or ``assets_dir`` first."""
    if directory is None:
        directory = get_settings().assets_dir
    return _read_asset(HTML_FILE, directory)


def load_default_assets(directory: Optional[Path] = None) -> DefaultAssets:
    """
    Load the default assets.

    Args:
        directory: Directory whose files take precedence over the packaged
            ones. Defaults to the ``assets_dir`` setting.

    Returns:
        DefaultAssets with every file read into memory

    Raises:
        AssetNotFoundError: If an asset exists in neither location
    """
    if directory is None:
        directory = get_settings().assets_dir

    assets = DefaultAssets(
        html=_read_asset(HTML_FILE, directory),
        font=_read_asset(FONT_FILE, directory),
        style=_read_asset(STYLE_FILE, directory),
        config=_read_asset(CONFIG_FILE, directory),
        mermaid_js=_read_asset(MERMAID_JS_FILE, directory),
    )
    logger.debug(
        "Default assets loaded",
        directory=str(directory) if directory else "package",
        mermaid_js_size=len(assets.mermaid_js),
    )
    return assets
