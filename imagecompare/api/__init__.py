"""
API package for imagecompare.

Provides the Flask blueprint exposing the engine over JSON.
"""

from __future__ import annotations

from .routes import api

__all__ = ['api']
