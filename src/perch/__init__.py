"""Perch — a named-route registry.

Maps concrete paths to ``(name, params)`` and back, using path templates
like ``/post/:id``. Routes are tried in registration order; the first
match wins.

Basic usage::

    from perch import RouteRegistry

    routes = RouteRegistry([
        ("home", "/"),
        ("post", "/post/:id", {"template": "post.html"}),
    ])

    routes.match("/post/123").params   # {"id": "123"}
    routes.make_path("post", {"id": 7})  # "/post/7"
"""

__version__ = "0.1.0"
__all__ = [
    "GenerationError",
    "InvalidArgumentError",
    "InvalidPatternError",
    "InvalidRouteError",
    "PerchError",
    "RegistryConfig",
    "RouteMatch",
    "RouteRecord",
    "RouteRegistry",
    "RouteSpec",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "GenerationError": "perch.errors",
    "InvalidArgumentError": "perch.errors",
    "InvalidPatternError": "perch.errors",
    "InvalidRouteError": "perch.errors",
    "PerchError": "perch.errors",
    "RegistryConfig": "perch.config",
    "RouteMatch": "perch.routing.route",
    "RouteRecord": "perch.routing.route",
    "RouteRegistry": "perch.routing.registry",
    "RouteSpec": "perch.routing.route",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
