from typing import Iterable


class PulseError(Exception):
    pass


class ScoringContractError(PulseError):
    """The caller handed us structurally broken input. Never raised for missing seller data."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        self.fields = list(fields)
        if self.fields:
            message = f"{message}: {', '.join(self.fields)}"
        super().__init__(message)
