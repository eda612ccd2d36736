"""Structured logging package."""

from finance_core.observability.logger import bind_tenant, configure_logging

__all__ = ["bind_tenant", "configure_logging"]
