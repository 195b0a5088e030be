"""Path template compilation.

Turns a template such as ``/post/:id(\\d+)`` into two artifacts:

- a ``Matcher`` (anchored regex + ordered ``Param`` descriptors) used
  to test and extract values from concrete paths;
- a ``Generator`` that substitutes values back into the template.

Both are derived from the same token list, so anything a generator
produces is shaped like what the matcher accepts.

Grammar::

    "/post"            -> literal
    "/post/:id"        -> named parameter, one segment
    "/post/:id(\\d+)"   -> named parameter with a custom sub-pattern
    "/post/(\\d+)"      -> unnamed parameter, keyed by position (0, 1, ...)
    "/:id?" "/:id*" "/:id+"  -> optional / zero-or-more / one-or-more
    "/files/*"         -> unnamed asterisk parameter, matches ``.*``
    "/\\:literal"       -> escaped character
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass

from perch.config import RegistryConfig
from perch.errors import GenerationError, InvalidPatternError
from perch.routing.encoding import encode_asterisk, encode_component

# Groups: 1 escaped char, 2 prefix, 3 name, 4 custom pattern,
# 5 unnamed group pattern, 6 modifier, 7 asterisk
_TOKEN_RE = re.compile(
    r"(\\.)"
    r"|([/.])?(?:(?::(\w+)(?:\(((?:\\.|[^\\()])+)\))?|\(((?:\\.|[^\\()])+)\))([+*?])?|(\*))",
    re.ASCII,
)

# Characters that would change the meaning of a custom sub-pattern once it
# is embedded in the route regex.
_GROUP_ESCAPE_RE = re.compile(r"([=!:$/()])")

_DEFAULT_CONFIG = RegistryConfig()


@dataclass(frozen=True, slots=True)
class Param:
    """A parameter parsed out of a template.

    ``name`` is a ``str`` for ``:name`` parameters and an ``int`` for
    unnamed groups and asterisks, numbered left to right from 0.
    """

    name: str | int
    prefix: str = ""
    delimiter: str = "/"
    optional: bool = False
    repeat: bool = False
    partial: bool = False
    asterisk: bool = False
    pattern: str = "[^/]+?"


Token = str | Param


def _escape_group(group: str) -> str:
    return _GROUP_ESCAPE_RE.sub(r"\\\1", group)


def _check_literal(template: str, text: str) -> None:
    if "(" in text or ")" in text:
        raise InvalidPatternError(template, f"unbalanced group in {text!r}")


def parse(template: str, config: RegistryConfig | None = None) -> list[Token]:
    """Split *template* into literal strings and ``Param`` tokens.

    Examples::

        "/"              -> ["/"]
        "/post/:id"      -> ["/post", Param("id", prefix="/")]
        "/:type/*x/:id"  -> [Param("type"), Param(0, asterisk=True), "x", Param("id")]

    Raises ``InvalidPatternError`` for empty or non-string templates,
    stray parentheses, duplicate parameter names, and custom
    sub-patterns that are not valid regular expressions. This is stricter
    than path-to-regexp 1.x, which keeps stray parentheses as literal
    text and lets the last duplicate capture win.
    """
    if not isinstance(template, str) or not template:
        raise InvalidPatternError(template, "template must be a non-empty string")

    config = config or _DEFAULT_CONFIG
    tokens: list[Token] = []
    seen: set[str | int] = set()
    key = 0
    index = 0
    path = ""

    for res in _TOKEN_RE.finditer(template):
        literal = template[index : res.start()]
        _check_literal(template, literal)
        path += literal
        index = res.end()

        escaped = res.group(1)
        if escaped:
            path += escaped[1]
            continue

        prefix, name, capture, group, modifier, asterisk = res.group(2, 3, 4, 5, 6, 7)
        following = template[index] if index < len(template) else None

        if path:
            tokens.append(path)
            path = ""

        param_name: str | int
        if name:
            param_name = name
        else:
            param_name = key
            key += 1
        if param_name in seen:
            raise InvalidPatternError(template, f"duplicate parameter {param_name!r}")
        seen.add(param_name)

        delimiter = prefix or config.delimiter
        custom = capture or group
        if custom:
            pattern = _escape_group(custom)
            try:
                re.compile(pattern)
            except re.error as exc:
                raise InvalidPatternError(
                    template, f"bad pattern for parameter {param_name!r}: {exc}"
                ) from exc
        elif asterisk:
            pattern = ".*"
        else:
            pattern = f"[^{re.escape(delimiter)}]+?"

        tokens.append(
            Param(
                name=param_name,
                prefix=prefix or "",
                delimiter=delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prefix is not None and following is not None and following != prefix,
                asterisk=bool(asterisk),
                pattern=pattern,
            )
        )

    rest = template[index:]
    _check_literal(template, rest)
    path += rest
    if path:
        tokens.append(path)
    return tokens


def _flags(config: RegistryConfig) -> int:
    # Character classes such as \d and \w stay ASCII-only
    return re.ASCII if config.sensitive else re.ASCII | re.IGNORECASE


def tokens_to_regex(tokens: list[Token], config: RegistryConfig | None = None) -> str:
    """Build the anchored regex source for a token list."""
    config = config or _DEFAULT_CONFIG
    route = ""

    for token in tokens:
        if isinstance(token, str):
            route += re.escape(token)
            continue

        prefix = re.escape(token.prefix)
        capture = f"(?:{token.pattern})"
        if token.repeat:
            capture += f"(?:{prefix}{capture})*"

        if token.optional:
            if token.partial:
                capture = f"{prefix}({capture})?"
            else:
                capture = f"(?:{prefix}({capture}))?"
        else:
            capture = f"{prefix}({capture})"
        route += capture

    delimiter = re.escape(config.delimiter)
    ends_with_delimiter = route.endswith(delimiter)

    if not config.strict:
        if ends_with_delimiter:
            route = route[: -len(delimiter)]
        route += rf"(?:{delimiter}(?=\Z))?"

    if config.end:
        route += r"\Z"
    elif not (config.strict and ends_with_delimiter):
        route += rf"(?={delimiter}|\Z)"

    return "^" + route


@dataclass(frozen=True, slots=True)
class Matcher:
    """Compiled matcher for one template.

    ``keys`` lists the parameters in capture-group order.
    """

    template: str
    regex: re.Pattern[str]
    keys: tuple[Param, ...]

    def test(self, path: str) -> bool:
        return self.regex.match(path) is not None

    def match(self, path: str) -> dict[str | int, str | None] | None:
        """Extract parameter values from *path*, or ``None`` if it doesn't match.

        Optional parameters that did not participate map to ``None``.
        """
        found = self.regex.match(path)
        if found is None:
            return None
        return {key.name: found.group(i + 1) for i, key in enumerate(self.keys)}


class Generator:
    """Compiled path generator for one template.

    Call it with a mapping of parameter values::

        gen = compile_generator("/post/:id(\\d+)")
        gen({"id": 42})   # "/post/42"
        gen({})           # raises GenerationError

    Values are percent-encoded and each encoded value must satisfy the
    parameter's sub-pattern.
    """

    __slots__ = ("_checks", "_tokens", "template")

    def __init__(self, template: str, tokens: list[Token], config: RegistryConfig) -> None:
        self.template = template
        self._tokens = tuple(tokens)
        flags = _flags(config)
        self._checks = tuple(
            re.compile(f"(?:{token.pattern})", flags) if isinstance(token, Param) else None
            for token in tokens
        )

    def __call__(self, params: Mapping[str | int, object] | None = None) -> str:
        data = params or {}
        path = ""

        for token, check in zip(self._tokens, self._checks, strict=True):
            if isinstance(token, str):
                path += token
                continue

            value = _lookup(data, token.name)
            if value is None:
                if not token.optional:
                    msg = f"Expected {token.name!r} to be defined"
                    raise GenerationError(msg)
                if token.partial:
                    path += token.prefix
                continue

            if isinstance(value, (list, tuple)):
                if not token.repeat:
                    msg = f"Expected {token.name!r} to not repeat, got {value!r}"
                    raise GenerationError(msg)
                if not value:
                    if token.optional:
                        continue
                    msg = f"Expected {token.name!r} to not be empty"
                    raise GenerationError(msg)
                for j, item in enumerate(value):
                    segment = encode_component(item)
                    _check_segment(check, token, segment)
                    path += (token.prefix if j == 0 else token.delimiter) + segment
                continue

            segment = encode_asterisk(value) if token.asterisk else encode_component(value)
            _check_segment(check, token, segment)
            path += token.prefix + segment

        return path


def _lookup(data: Mapping[str | int, object], name: str | int) -> object:
    value = data.get(name)
    if value is None and isinstance(name, int):
        value = data.get(str(name))
    return value


def _check_segment(check: re.Pattern[str] | None, token: Param, segment: str) -> None:
    if check is not None and check.fullmatch(segment) is None:
        msg = f"Expected {token.name!r} to match {token.pattern!r}, got {segment!r}"
        raise GenerationError(msg)


def compile_matcher(template: str, config: RegistryConfig | None = None) -> Matcher:
    """Compile *template* into a ``Matcher``.

    Raises ``InvalidPatternError`` if the template is malformed.
    """
    config = config or _DEFAULT_CONFIG
    tokens = parse(template, config)
    source = tokens_to_regex(tokens, config)
    try:
        regex = re.compile(source, _flags(config))
    except re.error as exc:
        raise InvalidPatternError(template, str(exc)) from exc
    keys = tuple(token for token in tokens if isinstance(token, Param))
    return Matcher(template=template, regex=regex, keys=keys)


def compile_generator(template: str, config: RegistryConfig | None = None) -> Generator:
    """Compile *template* into a ``Generator``.

    Raises ``InvalidPatternError`` if the template is malformed.
    """
    config = config or _DEFAULT_CONFIG
    return Generator(template, parse(template, config), config)
