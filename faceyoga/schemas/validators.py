from typing import List, Optional
from urllib.parse import urlparse


def validate_video_url(value: Optional[str]) -> Optional[str]:
    """Empty means no video; anything else must be an absolute http(s) URL."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid video URL")
    return value


def require_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


def clean_list(values: Optional[List[str]], field_name: str) -> List[str]:
    cleaned = [v.strip() for v in (values or []) if v and v.strip()]
    if not cleaned:
        raise ValueError(f"At least one {field_name} is required")
    return cleaned
