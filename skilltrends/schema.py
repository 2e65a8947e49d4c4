from typing import Any, Dict, List
from urllib.parse import urlparse

REQUIRED_FIELDS = ["url", "skills", "timestamp"]


class JobRecordError(ValueError):
    """Raised when a job record fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def validate_job_record(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    Only url, skills and timestamp are checked; any other scrape metadata
    (title, company, source, ...) is passed through untouched.
    """
    if not isinstance(data, dict):
        return ["Job record must be an object"]

    errors: List[str] = []
    for f in REQUIRED_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")

    url = data.get("url")
    if "url" in data:
        if not isinstance(url, str) or not url.strip():
            errors.append("Field 'url' must be a non-empty string")
        elif not _valid_url(url):
            errors.append("Field 'url' must be a valid absolute URL (scheme + host)")

    if "skills" in data:
        skills = data["skills"]
        if not isinstance(skills, list):
            errors.append("Field 'skills' must be a list of strings")
        elif not all(isinstance(s, str) and s.strip() for s in skills):
            errors.append("Field 'skills' must contain only non-empty strings")

    if "timestamp" in data:
        ts = data["timestamp"]
        # bool is an int subclass
        if isinstance(ts, bool) or not isinstance(ts, int):
            errors.append("Field 'timestamp' must be an integer (epoch milliseconds)")
        elif ts < 0:
            errors.append("Field 'timestamp' must not be negative")

    return errors


def require_valid(data: Any) -> Dict[str, Any]:
    """Return the record unchanged, or raise JobRecordError."""
    errors = validate_job_record(data)
    if errors:
        raise JobRecordError(errors)
    return data
