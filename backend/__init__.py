"""
Decision Queue FastAPI backend.
"""
