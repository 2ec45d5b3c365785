"""HTTP API for Mercury CI."""

from .app import app, get_pipeline

__all__ = ["app", "get_pipeline"]
