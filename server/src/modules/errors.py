class GameError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(GameError):
    status_code = 404


class InvalidRequest(GameError):
    status_code = 400


class UpstreamFailure(GameError):
    """Store unreachable or a write failed. Callers may retry."""
    status_code = 500
