# settings_filter.py
from typing import Dict, Iterable


def filter_settings(settings: Dict[str, str], categories: Iterable[str]) -> Dict[str, str]:
    """Keeps the settings whose lower-cased key contains any category token."""
    tokens = [c.strip().lower() for c in categories if c and c.strip()]
    if not tokens:
        return {}
    return {
        key: value
        for key, value in settings.items()
        if any(token in key.lower() for token in tokens)
    }
