"""RouteSpec, RouteRecord and RouteMatch."""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from perch.errors import InvalidRouteError
from perch.routing.pattern import Generator, Matcher, Param


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """Normalized input for one route: ``(name, path, meta)``.

    Both ``RouteRegistry.add`` and ``RouteRegistry.add_route`` funnel
    through this type before validation.
    """

    name: str
    path: str
    meta: Any = None

    @classmethod
    def from_tuple(cls, spec: "RouteSpec | tuple[Any, ...] | list[Any]") -> "RouteSpec":
        """Unpack a ``(name, path)`` or ``(name, path, meta)`` sequence.

        A ``RouteSpec`` passes through unchanged.
        Raises ``InvalidRouteError`` for any other shape.
        """
        if isinstance(spec, RouteSpec):
            return spec
        if not isinstance(spec, (tuple, list)) or len(spec) not in (2, 3):
            msg = f"Route spec must be a (name, path[, meta]) tuple, got {spec!r}"
            raise InvalidRouteError(msg)
        return cls(*spec)

    def validate(self) -> None:
        """Raise ``InvalidRouteError`` unless name and path are non-empty."""
        if not self.name or not self.path:
            msg = f'"name" and "path" must be defined, got name={self.name!r} path={self.path!r}'
            raise InvalidRouteError(msg)


class GeneratorCell:
    """Fill-once holder for a record's path generator.

    Starts empty. ``get_or_compile`` runs the factory at most once, even
    when several threads ask at the same time.
    """

    __slots__ = ("_generator", "_lock")

    def __init__(self) -> None:
        self._generator: Generator | None = None
        self._lock = threading.Lock()

    @property
    def compiled(self) -> bool:
        return self._generator is not None

    def get_or_compile(self, factory: Callable[[], Generator]) -> Generator:
        generator = self._generator
        if generator is not None:
            return generator
        with self._lock:
            if self._generator is None:
                self._generator = factory()
            return self._generator


@dataclass(frozen=True, slots=True)
class RouteRecord:
    """A registered route.

    ``matcher`` is compiled when the record is created and never changes.
    The generator lives in ``generator_cell`` and is compiled on first use.
    """

    name: str
    path: str
    meta: Any
    matcher: Matcher
    generator_cell: GeneratorCell = field(default_factory=GeneratorCell, compare=False, repr=False)

    @property
    def keys(self) -> tuple[Param, ...]:
        return self.matcher.keys


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful match.

    ``params`` has an entry for every parameter in the template; optional
    parameters that were not present in the path map to ``None``.
    """

    name: str
    meta: Any
    params: dict[str | int, str | None]
    route: RouteRecord | None = field(default=None, compare=False, repr=False)
