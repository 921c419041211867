"""Configuration constants.

Centralizes fixed values shared by the relay, the controller and the UI.
The only value read from the environment is the provider credential.
"""

import os

# Provider credential
CREDENTIAL_ENV_VAR = "GROQ_API_KEY"

# Completion request
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama3-70b-8192"
DEFAULT_TEMPERATURE = 0.7
REQUEST_TIMEOUT_SECONDS = 15.0

# Relay HTTP boundary
CHAT_ENDPOINT = "/api/chat"
HEALTH_ENDPOINT = "/health"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_RELAY_URL = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
STATUS_CONFIGURATION_ERROR = 500
STATUS_PROVIDER_FAILURE = 502

# Result texts
NO_RESPONSE_PLACEHOLDER = "No response"
PROVIDER_FAILURE_ERROR = "AI processing failed"
CONFIGURATION_ERROR = "Server configuration error"
CONFIGURATION_ERROR_DETAILS = "API key not configured"

# Client-side texts
EMPTY_REPLY_FALLBACK = "I didn't get a response"
ERROR_APOLOGY = "Sorry, I encountered an error"
SERVER_ERROR_TEXT = "Server error"

# Speech
RECOGNITION_LANGUAGE = "en-US"
SPEECH_RATE = 1.0
SPEECH_PITCH = 1.0
BASE_WORDS_PER_MINUTE = 200  # pyttsx3 default rate


def get_api_key() -> str | None:
    """Read the provider credential, treating blank values as absent."""
    value = os.getenv(CREDENTIAL_ENV_VAR, "").strip()
    return value or None
