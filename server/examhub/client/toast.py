from dataclasses import dataclass


@dataclass(frozen=True)
class Toast:
    """User-facing notification. `kind` is one of info, success, warn, error."""
    message: str
    kind: str = "info"
