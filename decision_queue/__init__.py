"""
Decision Queue
Ranks, rolls up and curates attention-worthy decision items for the
portfolio decision-support dashboard.
"""

__version__ = "1.0.0"
