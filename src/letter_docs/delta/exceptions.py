"""Delta translation exceptions."""


class UnsupportedFormatError(ValueError):
    """Raised when editor content is not a ``{textValue, delta: {ops}}`` value."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Unsupported content format: {reason}")
