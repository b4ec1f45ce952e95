"""
Input validation package.
"""

from .validators import SecurityValidator, safe_text_validator

__all__ = [
    'SecurityValidator',
    'safe_text_validator',
]
