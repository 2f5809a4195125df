"""HTTP boundary exposing the draughts engine to a presentation client."""

from .app import create_app

__all__ = ["create_app"]
