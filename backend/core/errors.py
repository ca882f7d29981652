"""
Error taxonomy for the ingredient endpoints.

Every error carries a stable machine code and the HTTP status the API layer
answers with. Handlers never retry; the app turns these into JSON bodies.
"""


class PantryAIError(Exception):
    """Base class for all errors surfaced to API callers."""

    code = "internal_server_error"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(PantryAIError):
    code = "invalid_input"
    status_code = 400
    default_message = "Invalid input"


class MethodNotAllowed(PantryAIError):
    code = "method_not_allowed"
    status_code = 405
    default_message = "Method not allowed"


class ConfigurationError(PantryAIError):
    code = "missing_api_key"
    status_code = 500
    default_message = "OpenAI API key not configured"


class UpstreamUnavailable(PantryAIError):
    code = "upstream_unavailable"
    status_code = 500
    default_message = "Failed to get AI response"


class UpstreamEmptyReply(PantryAIError):
    code = "no_ai_response"
    status_code = 500
    default_message = "No response from AI"


class UpstreamFormatError(PantryAIError):
    code = "invalid_ai_response"
    status_code = 500
    default_message = "Invalid response format from AI"
