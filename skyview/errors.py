"""Error taxonomy shared by the ingest, pipeline, and API layers."""


class SkyViewError(Exception):
    """Base class for all application errors."""


class UpstreamUnavailable(SkyViewError):
    """The weather provider timed out, was unreachable, or returned an error status."""

    def __init__(self, reason: str, timed_out: bool = False):
        super().__init__(reason)
        self.reason = reason
        self.timed_out = timed_out


class CityNotFound(SkyViewError):
    def __init__(self, city: str):
        super().__init__(f"No geocoding candidates for {city!r}")
        self.city = city


class MalformedInput(SkyViewError):
    """A payload's top-level shape is wrong (e.g. not a list where one is expected)."""


class ConfigurationError(SkyViewError):
    pass


class AuthError(SkyViewError):
    pass
