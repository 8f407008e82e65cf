"""
Shared API Dependencies
=======================

FastAPI dependency providers for collaborators wired in the app lifespan.
"""

from fastapi import Request

from src.infrastructure.cache import ICache


def get_cache(request: Request) -> ICache:
    """Cache instance created at startup."""
    return request.app.state.cache
