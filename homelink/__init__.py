"""homelink - connection health orchestration for smart-home agents."""

__version__ = "0.1.0"
__logo__ = "🔗"
