"""Registry configuration.

RegistryConfig is a frozen dataclass, immutable after creation and shared
by every template the registry compiles.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Matching and generation options. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RegistryConfig(sensitive=True, strict=True)
    """

    # Matching
    sensitive: bool = False  # Case-sensitive literal matching
    strict: bool = False  # When False, one trailing delimiter is tolerated
    end: bool = True  # When False, match a prefix that ends at a delimiter
    delimiter: str = "/"  # Delimiter for parameters that have no prefix

    # Generation
    verify_paths: bool = True  # Re-test generated paths against the matcher

    def __post_init__(self) -> None:
        if not self.delimiter:
            msg = "RegistryConfig.delimiter must be a non-empty string."
            raise ValueError(msg)
