"""Domain outcomes raised by the repository and mapped to HTTP by the app."""


class TopologyError(Exception):
    """Base class for failures the caller is meant to see."""
    status_code = 500

    def __init__(self, message="Internal server error"):
        self.message = message
        super().__init__(self.message)


class NotFound(TopologyError):
    """Raised when no row exists for a given id."""
    status_code = 404

    def __init__(self, message="Not found"):
        super().__init__(message)


class Conflict(TopologyError):
    """Raised when a link would duplicate an existing (from, to, handles) tuple."""
    status_code = 409

    def __init__(self, message="Link already exists"):
        super().__init__(message)


class InvalidReference(TopologyError):
    """Raised when a link endpoint does not point at an existing device."""
    status_code = 400

    def __init__(self, message="fromId/toId invalid (device not found)"):
        super().__init__(message)
