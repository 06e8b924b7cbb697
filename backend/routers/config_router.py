"""Public configuration endpoint for the site frontend."""

from fastapi import APIRouter

from services.config_service import PublicSiteConfig, get_public_site_config

router = APIRouter(prefix="/config", tags=["configuration"])


@router.get("/site", response_model=PublicSiteConfig)
def get_site() -> PublicSiteConfig:
    """Get public site configuration.

    Includes the Turnstile site key the contact form renders its widget
    with; the secret never leaves the server.
    """
    return get_public_site_config()
