"""
Todo API package.

A FastAPI service storing todo items in a JSON file or PostgreSQL. The
application instance lives in `todo_api.main`; `python -m todo_api` serves it.
"""

__version__ = "1.0.0"
