"""
Search, browsing and aggregation over public profile data.

- query_builder: request filters to SQLAlchemy clauses
- pagination: page/limit validation and the page envelope
- shaper: public projections of profiles, projects and work entries
- aggregator: skill histogram, top skills, categories, suggestions
- service: one function per public listing endpoint
"""

from .pagination import Page, PageRequest
from .query_builder import SearchFilters

__all__ = ["Page", "PageRequest", "SearchFilters"]
