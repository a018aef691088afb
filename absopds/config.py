"""
config.py - Configuration model for absopds
"""

import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from rich.console import Console

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

console = Console()


class UpstreamConfig(BaseModel):
    url: str = "http://localhost:13378"
    api_key: str = ""
    timeout: int = Field(default=30, ge=1, description="Total timeout in seconds for one upstream call")


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=3010, ge=1, le=65535)
    use_proxy_links: bool = Field(
        default=False,
        description="Point acquisition links at /opds/proxy instead of the upstream URL",
    )


class CatalogConfig(BaseModel):
    """Parameters that control filtering, pagination and category browsing."""

    page_size: int = Field(default=20, ge=1, description="Items per OPDS page")
    show_audiobooks: bool = Field(
        default=False,
        description="Include items without an ebook format (audiobook-only items)",
    )
    show_char_cards: bool = Field(
        default=False,
        description="Group category listings into first-letter cards with counts",
    )
    parallel_threshold: int = Field(
        default=5000,
        ge=0,
        description="Collections with at least this many items are filtered in parallel",
    )
    max_workers: int = Field(default=0, ge=0, description="Worker threads for parallel passes (0 = default)")


class I18nConfig(BaseModel):
    languages_dir: Path = Path(__file__).resolve().parent / "languages"
    fallback_language: str = "en"


class AbsOpdsConfig(BaseModel):
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    i18n: I18nConfig = Field(default_factory=I18nConfig)
    config_path: Optional[Path] = None


def load_config(config_path: Path) -> AbsOpdsConfig:
    """Load configuration from TOML file"""

    if not config_path.exists():
        console.print(f"[red][ERROR][/red] Configuration file not found: {config_path}")
        console.print("Please create config.toml with your Audiobookshelf URL and API key")
        sys.exit(1)

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)

        config = AbsOpdsConfig(
            upstream=UpstreamConfig(**config_data.get("upstream", {})),
            server=ServerConfig(**config_data.get("server", {})),
            catalog=CatalogConfig(**config_data.get("catalog", {})),
            i18n=I18nConfig(**config_data.get("i18n", {})),
            config_path=config_path,
        )
    except (OSError, tomllib.TOMLDecodeError, ValidationError, TypeError) as e:
        console.print(f"[red][ERROR][/red] Error loading configuration: {e}")
        sys.exit(1)

    if not config.i18n.languages_dir.is_absolute():
        config.i18n.languages_dir = config_path.parent / config.i18n.languages_dir
    return config
