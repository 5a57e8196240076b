"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

import re
from dataclasses import dataclass

from hashroute.errors import ConfigurationError

# Same placeholder syntax the pattern compiler recognises.
_PLACEHOLDER = re.compile(r"[:*]\w", re.ASCII)


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    Override what you need::

        config = RouterConfig(root="/app")
    """

    # Prefix stripped from every incoming hash and prepended to redirect targets
    root: str = ""

    # Refuse to follow a redirect back into the chain it came from
    detect_redirect_loops: bool = True

    def __post_init__(self) -> None:
        if _PLACEHOLDER.search(self.root):
            msg = f"Router root {self.root!r} must not contain ':name' or '*name' placeholders."
            raise ConfigurationError(msg)
