"""
API routers for the decision queue backend.

- decisions: Post-processing and dashboard curation of decision items
"""

from .decisions import router as decisions_router

__all__ = [
    'decisions_router',
]
