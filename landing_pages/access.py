"""
Preview-token access control for public landing page requests.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidPreviewToken, LandingPageNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    is_preview: bool
    cacheable: bool


PUBLIC_ACCESS = AccessDecision(is_preview=False, cacheable=True)
PREVIEW_ACCESS = AccessDecision(is_preview=True, cacheable=False)


def check_access(landing_page, preview_token: Optional[str] = None) -> AccessDecision:
    """
    Decide how a public request for ``landing_page`` may be served.

    - token given and matching: preview of draft or published content, never cached
    - token given and wrong: InvalidPreviewToken (403)
    - no token, draft: LandingPageNotFound (404), same as a missing page
    - no token, published: public access, cache-eligible
    """
    if preview_token is not None:
        if secrets.compare_digest(preview_token.encode(), landing_page.preview_token.encode()):
            return PREVIEW_ACCESS
        logger.warning(
            "Rejected preview token for landing page %s (resource %s)",
            landing_page.pk, landing_page.resource_id,
        )
        raise InvalidPreviewToken()

    if not landing_page.is_published:
        raise LandingPageNotFound()

    return PUBLIC_ACCESS
