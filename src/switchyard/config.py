"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(default_method="POST", log_resolutions=True)
    """

    # Method used by add_routes() when a map omits "method", and by resolve()
    default_method: str = "GET"

    # Characters stripped from both ends of a pattern or request path
    strip_chars: str = " /"

    # Emit a DEBUG record for every resolve() call
    log_resolutions: bool = False
