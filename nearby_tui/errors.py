"""Error taxonomy. Nothing in here is fatal to a session."""


class NearbyError(Exception):
    """Base for every error the client reports to the user."""


class UnknownCity(NearbyError, ValueError):
    def __init__(self, city):
        super().__init__(f"Unknown city: {city!r}")
        self.city = city


class InvalidRadius(NearbyError, ValueError):
    def __init__(self, raw, reason: str = "must be a positive number"):
        super().__init__(f"Invalid radius {raw!r}: {reason}")
        self.raw = raw


class QueryError(NearbyError):
    """A remote query did not produce a usable response."""


class MalformedResponse(QueryError):
    pass


class QueryTimeout(QueryError, TimeoutError):
    pass


class NetworkError(QueryError):
    def __init__(self, msg: str, status_code=None):
        super().__init__(msg)
        self.status_code = status_code
