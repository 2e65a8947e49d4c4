"""Shared page fetching for job posting scrapes."""

from urllib.parse import urlparse

import requests

from ..logger import get_logger

logger = get_logger()

USER_AGENT = "Mozilla/5.0 (compatible; skilltrends/0.1)"


def fetch_page(url: str, site: str = "") -> str:
    """Fetch a job page and return its HTML.

    Args:
        url: The page URL
        site: Site name for metrics (default: the URL's host)

    Returns:
        Response body text on success

    Raises:
        ValueError: On any HTTP error, timeout, or request failure
    """
    site = site or urlparse(url).netloc or "unknown"
    logger.record_scrape_attempt(site)
    try:
        resp = requests.get(url, timeout=15, headers={"User-Agent": USER_AGENT})
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        logger.record_error(f"HTTPError_{status}")
        if status == 404:
            logger.warning("Job page not found", url=url, status=404)
            raise ValueError(f"Job page not found (404): {url}")
        logger.error("Job page request failed", url=url, status=status)
        raise ValueError(f"Job page request failed ({status}): {url}")
    except requests.exceptions.Timeout:
        logger.record_error("Timeout")
        logger.warning("Job page request timed out", url=url)
        raise ValueError("Job page request timed out. Try again later.")
    except requests.exceptions.RequestException as e:
        logger.record_error("RequestException")
        logger.error("Job page request error", url=url, error=str(e))
        raise ValueError(f"Job page request error: {e}")

    logger.record_scrape_success(site)
    return resp.text
