"""
Input validation utilities.
Free text is stripped of markup before it reaches the domain.
"""

from typing import Optional

import bleach


class SecurityValidator:
    """Security-focused validators to prevent injection attacks."""

    @staticmethod
    def sanitize_text(value: Optional[str]) -> Optional[str]:
        """Remove all HTML tags and surrounding whitespace."""
        if not isinstance(value, str):
            return value

        cleaned = bleach.clean(value, tags=[], attributes={}, strip=True)
        # bleach escapes bare ampersands and angle brackets; plain text keeps them.
        cleaned = cleaned.replace("&amp;", "&").replace("&lt;", "<").replace("&gt;", ">")
        return cleaned.strip()


def safe_text_validator(value: Optional[str]) -> Optional[str]:
    """Pydantic validator body for free-text fields."""
    if value is None:
        return value
    return SecurityValidator.sanitize_text(value)
