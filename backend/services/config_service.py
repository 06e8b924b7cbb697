"""Site configuration service.

Loads the public site metadata (name, links, navigation, contact email)
from a JSON file. The contact email doubles as the recipient of contact
form submissions.
"""

import json
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

from models.config import settings


class SiteLinks(BaseModel):
    """Social profile links."""

    github: str | None = None
    twitter: str | None = None
    linkedin: str | None = None


class NavItem(BaseModel):
    """A navigation entry; `name` is a message catalog key."""

    name: str
    href: str


class SiteConfig(BaseModel):
    """Public site metadata."""

    name: str
    title: str = ""
    description: str = ""
    tagline: str = ""
    url: str
    og_image: str | None = None
    links: SiteLinks = SiteLinks()
    email: str
    discord: str | None = None
    copyright: str = ""
    navigation: list[NavItem] = []
    footer_links_enabled: bool = False
    footer_links: list[NavItem] = []


class PublicSiteConfig(SiteConfig):
    """Site metadata plus what the contact form needs to render."""

    turnstile_sitekey: str | None = Field(
        default=None, description="Null when bot verification is off"
    )
    default_locale: str
    supported_locales: list[str]


@lru_cache(maxsize=1)
def load_site_config(config_path: str | None = None) -> SiteConfig:
    """Load site configuration from file.

    Args:
        config_path: Override for SITE_CONFIG_PATH.

    Returns:
        SiteConfig: Parsed and validated configuration, or the built-in
        default when the file does not exist.

    Raises:
        ValidationError: If config is invalid.
    """
    config_file = Path(config_path or settings.SITE_CONFIG_PATH)

    if not config_file.exists():
        return _get_default_config()

    with open(config_file, encoding="utf-8") as f:
        data = json.load(f)

    return SiteConfig(**data)


def _get_default_config() -> SiteConfig:
    return SiteConfig(
        name="Portfolio",
        description="Personal portfolio",
        url="http://localhost:3000",
        email="hello@example.com",
        navigation=[
            NavItem(name="home", href="#home"),
            NavItem(name="contact", href="#contact"),
        ],
    )


def get_site_config() -> SiteConfig:
    """Get the current site configuration."""
    return load_site_config()


def get_contact_recipient() -> str:
    """Where contact submissions are delivered."""
    return settings.CONTACT_RECIPIENT or get_site_config().email


def get_public_site_config() -> PublicSiteConfig:
    config = get_site_config()
    return PublicSiteConfig(
        **config.model_dump(),
        turnstile_sitekey=settings.TURNSTILE_SITEKEY or None,
        default_locale=settings.DEFAULT_LOCALE,
        supported_locales=settings.SUPPORTED_LOCALES,
    )


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when configuration changes at runtime.
    """
    load_site_config.cache_clear()
