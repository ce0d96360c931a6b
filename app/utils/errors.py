from typing import Optional

from fastapi.responses import JSONResponse


class StudioError(Exception):
    """Base class for failures surfaced to API clients as {"error": message}"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudioError):
    """Malformed or out-of-range client input, rejected before any provider call"""

    status_code = 400


class GenerationError(StudioError):
    """Provider returned no usable image or a referenced image could not be fetched"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class TransportError(StudioError):
    """The provider call itself failed (network, credentials, provider-side error)"""


def error_response(error: Exception) -> JSONResponse:
    """Convert any failure into the {"error": message} envelope"""
    if isinstance(error, StudioError):
        return JSONResponse(status_code=error.status_code, content={"error": error.message})
    return JSONResponse(status_code=500, content={"error": str(error) or "Failed to generate image"})
