"""HTTP middlewares."""

from src.projecthub.api.middlewares.logging_context import logging_context_middleware

__all__ = ["logging_context_middleware"]
