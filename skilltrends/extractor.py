"""
Extract job records from posting pages.

Skills are found by keyword matching against the posting description. Known
job boards have CSS selectors for description, title and company; any other
page falls back to the whole body text and the document title.
"""

import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .jobs import now_ms

SKILL_KEYWORDS = [
    "Python", "JavaScript", "TypeScript", "React", "Node.js", "SQL",
    "PostgreSQL", "MongoDB", "Docker", "Kubernetes", "AWS", "GCP",
    "Azure", "Machine Learning", "Deep Learning", "TensorFlow", "PyTorch",
    "FastAPI", "Django", "REST API", "GraphQL", "Redis", "Git", "CI/CD",
    "Linux", "Agile", "Scrum", "Data Structures", "System Design", "LLM",
    "OpenAI", "LangChain", "Vector DB", "Figma", "Tailwind", "Next.js",
    "Vue", "Angular", "Spring Boot", "Java", "Go", "Rust", "C++",
    "Microservices", "Spark", "Kafka", "Airflow", "Tableau", "Power BI",
    "Excel", "R", "MATLAB", "Flutter", "React Native", "Swift", "Kotlin",
    "Selenium", "Pytest", "Jest", "Cypress", "Terraform", "Ansible",
    "Jenkins", "GitHub Actions",
]

SITE_SELECTORS = {
    "linkedin.com": {
        "desc": ".jobs-description__content",
        "title": ".job-details-jobs-unified-top-card__job-title",
        "company": ".job-details-jobs-unified-top-card__company-name",
    },
    "naukri.com": {
        "desc": ".job-desc",
        "title": ".jd-header-title",
        "company": ".jd-header-comp-name",
    },
    "internshala.com": {
        "desc": ".internship_details",
        "title": ".profile-overview h1",
        "company": ".company-name",
    },
    "unstop.com": {
        "desc": ".opportunity-details",
        "title": ".opportunity-title",
        "company": ".company-info",
    },
}

# Whole-word, case-insensitive. Lookarounds instead of \b so that
# keywords ending in punctuation ("C++") can still match.
_SKILL_PATTERNS = [
    (skill, re.compile(rf"(?<!\w){re.escape(skill)}(?!\w)", re.IGNORECASE))
    for skill in SKILL_KEYWORDS
]

_COMPANY_SPLIT = re.compile(r"[|\-–—]")


def match_site(hostname: str) -> Optional[str]:
    """Return the SITE_SELECTORS key contained in hostname, if any."""
    for site in SITE_SELECTORS:
        if site in hostname:
            return site
    return None


def find_skills(text: str) -> List[str]:
    """Keywords present in text, in SKILL_KEYWORDS order."""
    return [skill for skill, pattern in _SKILL_PATTERNS if pattern.search(text)]


def _select_text(soup: BeautifulSoup, selector: str) -> str:
    el = soup.select_one(selector)
    return el.get_text(" ", strip=True) if el else ""


def _document_title(soup: BeautifulSoup) -> str:
    t = soup.find("title")
    return t.get_text(strip=True) if t else ""


def extract_job_data(html: str, url: str, timestamp: Optional[int] = None) -> Dict[str, Any]:
    """
    Build a job record from a posting page.

    Args:
        html: Page HTML
        url: Page URL (becomes the record's dedup key)
        timestamp: Scrape time in epoch ms (default: now)

    Returns:
        Dict with title, company, url, skills, timestamp and source
    """
    soup = BeautifulSoup(html, "html.parser")
    hostname = urlparse(url).hostname or ""
    site = match_site(hostname)
    selectors = SITE_SELECTORS[site] if site else None

    description = _select_text(soup, selectors["desc"]) if selectors else ""
    if not description:
        body = soup.body or soup
        description = body.get_text(" ", strip=True)

    doc_title = _document_title(soup)

    title = _select_text(soup, selectors["title"]) if selectors else ""
    if not title:
        title = doc_title.split("|")[0].split("-")[0].strip()

    company = _select_text(soup, selectors["company"]) if selectors else ""
    if not company:
        parts = _COMPANY_SPLIT.split(doc_title)
        company = parts[1].strip() if len(parts) > 1 else "Unknown"

    return {
        "title": title,
        "company": company,
        "url": url,
        "skills": find_skills(description),
        "timestamp": timestamp if timestamp is not None else now_ms(),
        "source": site or hostname,
    }
