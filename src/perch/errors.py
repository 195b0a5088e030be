"""Perch exception hierarchy.

Structural mistakes (a bad route definition, a bad call shape) raise.
Data-dependent outcomes (no match, incomplete params) are returned as
``None`` by the registry and never surface as exceptions.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class InvalidRouteError(PerchError, ValueError):
    """Raised when a route is added without both a name and a path template."""


class InvalidPatternError(PerchError, ValueError):
    """Raised when a path template cannot be compiled.

    Carries the offending ``template`` and a human-readable ``reason``.
    """

    def __init__(self, template: object, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid path template {template!r}: {reason}")


class InvalidArgumentError(PerchError, TypeError):
    """Raised when ``remove()`` gets something other than names."""


class GenerationError(PerchError, ValueError):
    """Raised by a compiled generator when params cannot fill the template.

    ``RouteRegistry.make_path`` catches this and returns ``None``.
    """
