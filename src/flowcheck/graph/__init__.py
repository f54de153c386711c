"""Graph view used by the chatflow validator."""

from .models import ChatflowGraph

__all__ = ["ChatflowGraph"]
