"""Rule language for matching dataclass events against compiled conditions."""

__version__ = "0.1.0"

__all__ = ["compiler", "engine", "errors", "operators", "parser", "schema"]