"""SkillTrends: scraped job postings in, skill demand trends out."""

__version__ = "0.1.0"
