"""Error types raised at the application boundary."""


class ValidationError(ValueError):
    """Raised when an input is outside its allowed range."""


class AnalysisError(RuntimeError):
    """Raised when a language model returns unusable output."""


class RateLimitError(RuntimeError):
    """Raised when a user exceeds a daily submission limit."""
