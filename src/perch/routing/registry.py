"""Ordered named-route registry.

Routes are kept in a single list in registration order. That order is
the whole priority model: ``match`` returns the first route whose
template accepts the path, and name lookups return the first route
registered under that name. Duplicate names are allowed.

Thread safety:
    - Records are frozen; each record's lazily compiled generator is
      guarded by its own lock
    - ``add``/``remove`` mutate the route list without locking; callers
      that mutate while other threads match must synchronize externally
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from perch.config import RegistryConfig
from perch.errors import InvalidArgumentError
from perch.routing.pattern import Generator, compile_generator, compile_matcher
from perch.routing.route import RouteMatch, RouteRecord, RouteSpec

logger = logging.getLogger("perch.routing")


class RouteRegistry:
    """Named routes with forward matching and reverse path generation.

    Usage::

        routes = RouteRegistry([
            ("home", "/"),
            ("post", "/post/:id", {"template": "post.html"}),
        ])
        routes.match("/post/123")
        # RouteMatch(name="post", meta={...}, params={"id": "123"})
        routes.make_path("post", {"id": 123})
        # "/post/123"
    """

    __slots__ = ("_config", "_routes")

    def __init__(
        self,
        routes: Iterable[RouteSpec | tuple[Any, ...]] | None = None,
        *,
        config: RegistryConfig | None = None,
    ) -> None:
        self._config = config or RegistryConfig()
        self._routes: list[RouteRecord] = []
        for spec in routes or ():
            self.add_route(spec)

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def routes(self) -> tuple[RouteRecord, ...]:
        """Snapshot of the registered routes in registration order."""
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[RouteRecord]:
        return iter(tuple(self._routes))

    def __contains__(self, name: object) -> bool:
        return any(route.name == name for route in self._routes)

    # -- Registration -------------------------------------------------------

    def add(self, name: str, path: str, meta: Any = None) -> "RouteRegistry":
        """Register *path* under *name*. Returns the registry for chaining.

        Raises ``InvalidRouteError`` if name or path is empty and
        ``InvalidPatternError`` if the template does not compile.
        """
        return self._append(RouteSpec(name, path, meta))

    def add_route(self, spec: RouteSpec | tuple[Any, ...]) -> "RouteRegistry":
        """Register a ``(name, path[, meta])`` tuple or a ``RouteSpec``."""
        return self._append(RouteSpec.from_tuple(spec))

    def _append(self, spec: RouteSpec) -> "RouteRegistry":
        spec.validate()
        matcher = compile_matcher(spec.path, self._config)
        self._routes.append(
            RouteRecord(name=spec.name, path=spec.path, meta=spec.meta, matcher=matcher)
        )
        logger.debug("Registered route %r -> %r", spec.name, spec.path)
        return self

    def remove(self, names: str | Iterable[str]) -> None:
        """Remove every route registered under *names*.

        Accepts one name or an iterable of names. Unknown names are
        ignored. Raises ``InvalidArgumentError`` for anything else.
        """
        if isinstance(names, str):
            targets = {names}
        elif isinstance(names, Iterable) and not isinstance(names, (bytes, Mapping)):
            members = list(names)
            if not all(isinstance(name, str) for name in members):
                msg = f"remove() expects a name or names, got {names!r}"
                raise InvalidArgumentError(msg)
            targets = set(members)
        else:
            msg = f"remove() expects a name or names, got {type(names).__name__}"
            raise InvalidArgumentError(msg)

        before = len(self._routes)
        self._routes = [route for route in self._routes if route.name not in targets]
        removed = before - len(self._routes)
        if removed:
            logger.debug("Removed %d route(s) named %s", removed, sorted(targets))

    # -- Lookup -------------------------------------------------------------

    def route_by_name(self, name: str) -> RouteRecord | None:
        """Return the first route registered under *name*, or ``None``."""
        for route in self._routes:
            if route.name == name:
                return route
        return None

    def route_for_path(self, path: str) -> RouteRecord | None:
        """Return the first route whose template accepts *path*, or ``None``."""
        for route in self._routes:
            if route.matcher.test(path):
                return route
        return None

    def has_match(self, path: str) -> bool:
        """True if any registered template accepts *path*."""
        return self.route_for_path(path) is not None

    def match(self, path: str) -> RouteMatch | None:
        """Match *path* against the routes in registration order.

        Returns a ``RouteMatch`` for the first route that accepts the
        path, or ``None``. Never raises for unmatched paths.
        """
        for route in self._routes:
            params = route.matcher.match(path)
            if params is not None:
                return RouteMatch(name=route.name, meta=route.meta, params=params, route=route)
        return None

    # -- Reverse ------------------------------------------------------------

    def make_path(self, name: str, params: Mapping[str | int, Any] | None = None) -> str | None:
        """Build a concrete path for the route named *name*.

        Returns ``None`` when no route has that name, a required parameter
        is missing, or a value does not fit its parameter's pattern.
        """
        route = self.route_by_name(name)
        if route is None:
            return None

        try:
            generator = route.generator_cell.get_or_compile(
                lambda: self._compile_generator(route)
            )
            path = generator(params)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Cannot build path for %r: %s", name, exc)
            return None

        if self._config.verify_paths and not route.matcher.test(path):
            logger.debug("Generated path %r does not match route %r", path, name)
            return None
        return path

    def _compile_generator(self, route: RouteRecord) -> Generator:
        logger.debug("Compiling generator for %r", route.name)
        return compile_generator(route.path, self._config)
