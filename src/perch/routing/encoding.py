"""Percent-encoding for values substituted into path templates.

Two flavors, one per parameter kind:

- ``encode_component`` for ordinary parameters: everything outside the
  unreserved set is escaped, including ``/``, so a value always stays
  inside its own segment.
- ``encode_asterisk`` for ``*`` parameters: ``/`` and the other URI
  delimiters survive, only ``?`` and ``#`` are escaped so the value
  cannot leak into the query or fragment.
"""

from urllib.parse import quote

# Characters left alone besides ASCII letters, digits and ``_.-~``
COMPONENT_SAFE = "!*'()"
ASTERISK_SAFE = "!*'();/:@&=+$,"


def _to_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_component(value: object) -> str:
    """Encode *value* for use as a single path segment.

    Examples::

        >>> encode_component(123)
        '123'
        >>> encode_component("a b/c")
        'a%20b%2Fc'
    """
    return quote(_to_text(value), safe=COMPONENT_SAFE)


def encode_asterisk(value: object) -> str:
    """Encode *value* for an asterisk parameter, keeping ``/`` intact."""
    return quote(_to_text(value), safe=ASTERISK_SAFE)
