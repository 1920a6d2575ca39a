"""
Core version-agnostic components for Mantle.

This package contains the shorthand schemas, the error taxonomy, the enum
mapping tables, the selector/template reconciler and the version dispatcher.
"""

__all__ = []
