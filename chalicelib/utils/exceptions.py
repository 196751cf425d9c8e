from chalicelib.constants.status_codes import http400, http404, http500

__all__ = ["ValidationError", "NotFoundError", "DownstreamError", "PartialFailure"]


# Request exceptions
class ValidationError(Exception):
    STATUS_CODE = http400
    LEVEL = 'warning'


class NotFoundError(Exception):
    STATUS_CODE = http404
    LEVEL = 'warning'


# Backend store / third-party exceptions
class DownstreamError(Exception):
    STATUS_CODE = http500
    LEVEL = 'error'

    def __init__(self, message, compensated: bool = False):
        super(DownstreamError, self).__init__(message)
        self.compensated = compensated


class PartialFailure(Exception):
    """
    A best-effort step failed; logged and reported as a warning, never raised to the caller
    """
    LEVEL = 'warning'
