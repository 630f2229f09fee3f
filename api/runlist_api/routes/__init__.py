"""API routes for the Run List API."""

from .runs import runs_router

__all__ = ["runs_router"]
