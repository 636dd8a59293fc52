"""API-related constants."""

# HTTP Status Codes
HTTP_500_INTERNAL_SERVER_ERROR = 500

# HTTP Headers
ACCEPT_HEADER = "Accept"
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Content types
JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPES = ("application/xml", "text/xml")

# Request logging
MAX_USER_AGENT_LENGTH = 200

# Pet endpoints
PET_ROUTE_PREFIX = "/pet"
PET_OPENAPI_TAG = "pet"
SUCCESS_MESSAGE = "SUCCESS"
DEFAULT_STATUS_FILTER = "available"

# Documentation-only security schemes
API_KEY_SCHEME = "api_key"
OAUTH_SCHEME = "petstore_auth"
OAUTH_SCOPES = {"write:pets": "", "read:pets": ""}
