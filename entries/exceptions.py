from rest_framework import status
from rest_framework.exceptions import APIException


class ProviderFailure(Exception):
    """The AI analysis provider raised, timed out or returned nothing usable."""


class MalformedProviderOutput(ProviderFailure):
    """The provider answered, but the text is not the structured data we asked for."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class StoreUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Your journal could not be saved right now. Please try again."
    default_code = "persistence_error"
