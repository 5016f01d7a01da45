class AdvisorError(Exception):
    """Base class for errors raised by the advisor session."""


class InvalidStateError(AdvisorError):
    """A turn was submitted that the session cannot accept right now."""

    def __init__(self, message: str, step=None):
        super().__init__(message)
        self.step = step
