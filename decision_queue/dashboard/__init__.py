"""
Dashboard module for the decision queue.

Provides Rich formatting of ranked and curated decision items.
"""

from .formatter import DashboardFormatter

__all__ = ['DashboardFormatter']
