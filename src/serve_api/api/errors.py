"""Error taxonomy for the query endpoint.

Every error carries the HTTP status it maps to and the plain-text message
written back to the client. The Flask layer translates them in one place.
"""


class ServeApiError(Exception):
    """Base class for failures resolved at the endpoint boundary."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameter(ServeApiError):
    """A mandatory query parameter is absent."""

    status_code = 400

    def __init__(self, parameter: str):
        super().__init__(f"Bad request, query for `{parameter}` is missing")
        self.parameter = parameter


class InvalidParameter(ServeApiError):
    """A query parameter is present but cannot be used (e.g. not an integer)."""

    status_code = 400

    def __init__(self, parameter: str):
        super().__init__(f"Bad request - {parameter} should be an integer.")
        self.parameter = parameter


class StoreUnavailable(ServeApiError):
    """The store connection could not be opened."""

    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__("Server error - couldn't open database connection")
        self.detail = detail


class QueryFailed(ServeApiError):
    """The store rejected the read (unknown table or column, bad expression)."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(f"Bad request - Your query couldn't be executed: {detail}")
        self.detail = detail


class SerializationError(ServeApiError):
    """The result set holds a value JSON cannot represent."""

    # Existing clients expect 400 here, not 500.
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(f"Bad request - Your data couldn't be retrieved: {detail}")
        self.detail = detail
