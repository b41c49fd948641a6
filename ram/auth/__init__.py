"""Authentication gate package."""

from ram.auth.gate import DEFAULT_REASON, AuthGate

__all__ = ["AuthGate", "DEFAULT_REASON"]
