"""Result models for service operations."""

from app.models.results.notes import NoteMutationResult

__all__ = ["NoteMutationResult"]
