from __future__ import annotations


class MalformedRequestError(Exception):
    """Raised when a request is missing required input."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
