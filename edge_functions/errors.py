from typing import Optional


class EdgeError(Exception):
    """Base for errors that map onto an ``{"error": ...}`` response body."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def response_message(self) -> str:
        return self.message


class MissingParameter(EdgeError):
    status_code = 400


class InvalidParameter(EdgeError):
    status_code = 400


class GatewayError(EdgeError):
    """Any failure reaching or decoding the generative model."""

    status_code = 500

    def response_message(self) -> str:
        return f"Gemini API Error: {self.message}"


class EmptyResponse(GatewayError):
    def __init__(self, message: str = "Received an empty response from the AI model.") -> None:
        super().__init__(message)


class ParseFailure(GatewayError):
    EXCERPT_LIMIT = 500

    def __init__(self, raw_text: str, reason: Optional[str] = None) -> None:
        self.excerpt = raw_text[: self.EXCERPT_LIMIT]
        detail = reason or "Failed to parse JSON from the AI model"
        super().__init__(f"{detail}. Raw response: {self.excerpt}")


class GatewayFailure(GatewayError):
    pass
