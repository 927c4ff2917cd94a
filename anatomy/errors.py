"""
Exception types for the layered anatomy package.

Construction problems raise ValidationError, misuse of the weighted sampler
raises PreconditionError. Both subclass ValueError so callers that already
catch ValueError keep working.
"""

from __future__ import annotations


class AnatomyError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(AnatomyError, ValueError):
    """Raised when a substance, part, limb, body or damage vector is malformed."""


class PreconditionError(AnatomyError, ValueError):
    """Raised when an operation is called with inputs it cannot draw from."""
