"""
Starter API: a layered FastAPI skeleton with bcrypt password hashing
and bearer-token authentication.
"""

__version__ = "1.0.0"
