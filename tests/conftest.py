"""
Test Configuration
==================

Pytest configuration with fixtures shared by all test types.
Provides test settings, default assets and resource stores.
"""

import pytest
from pathlib import Path

import mermaid_cli.config.settings as settings_module
from mermaid_cli.assets import DefaultAssets
from mermaid_cli.config.settings import Settings
from mermaid_cli.models.schemas import ResourceStore
from pydantic_settings import SettingsConfigDict


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    render_timeout_ms: int = 5000
    poll_interval_ms: int = 10
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="MERMAID_CLI_")


@pytest.fixture
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(autouse=True)
def override_settings(monkeypatch: pytest.MonkeyPatch, test_settings: TestSettings):
    """Override application settings for testing."""
    monkeypatch.setattr(settings_module, "settings", test_settings)
    yield test_settings


@pytest.fixture
def sample_defaults() -> DefaultAssets:
    """Small stand-ins for the packaged default assets."""
    return DefaultAssets(
        html=b"<!DOCTYPE html><html><body>shell</body></html>",
        font=b"wOF2-default-font",
        style=b"body { margin: 0; }",
        config=b'{"theme": "default"}',
        mermaid_js=b"globalThis.mermaid = {};",
    )


@pytest.fixture
def sample_diagram() -> bytes:
    """Minimal flowchart."""
    return b"graph TD; A-->B;"


@pytest.fixture
def diagram_file(tmp_path: Path, sample_diagram: bytes) -> Path:
    """Diagram written to a temporary file."""
    path = tmp_path / "diagram.mmd"
    path.write_bytes(sample_diagram)
    return path


@pytest.fixture
def sample_store(sample_defaults: DefaultAssets, sample_diagram: bytes) -> ResourceStore:
    """Resource store built from the sample defaults."""
    return ResourceStore(
        font=sample_defaults.font,
        style=sample_defaults.style,
        config=sample_defaults.config,
        diagram=sample_diagram,
        render_library=sample_defaults.mermaid_js,
    )
