"""Error taxonomy shared by every weather source."""


class WeatherSourceError(Exception):
    """Base class for failures raised while talking to a weather provider."""

    retryable: bool = True


class TransportError(WeatherSourceError):
    """Network or HTTP-level failure."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(WeatherSourceError):
    """The provider answered, but the body is not the JSON shape we expect."""


class DataUnavailable(WeatherSourceError):
    """Structurally valid response lacking mandatory data (daily/hourly arrays).

    Callers should keep whatever they had cached instead of showing this.
    """


class AuthenticationMissing(WeatherSourceError):
    """No usable credential is configured for the source."""

    retryable = False


class FetchCancelled(WeatherSourceError):
    """The caller abandoned the query before every sub-request resolved."""


class UnsupportedCapability(WeatherSourceError):
    """The selected source does not implement the requested capability."""

    retryable = False
