"""
Domain Layer - Request/Response Models

Pydantic models for the API contract. Fields are snake_case in Python
and travel as camelCase in JSON (see CamelModel).

Author: TM3
Date: 2026-01-12
"""
from gestion.domain.base import CamelModel, MessageResponse, Page, PageMeta, page_of

__all__ = ['CamelModel', 'MessageResponse', 'Page', 'PageMeta', 'page_of']
