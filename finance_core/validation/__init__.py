"""Journal validation package."""

from finance_core.validation.validator import JournalValidator

__all__ = ["JournalValidator"]
