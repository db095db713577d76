"""
Global constants for the apilogs package.
"""

# Application identifiers
APP_NAME = "apilogs"
LOG_APP_NAME = "APILOGS"
LOG_FILE_NAME = "apilogs"

# Diagnostics logging
LOG_RETENTION_DAYS = 7
LOG_LEVEL_ENV_VAR = "APILOGS_LOG_LEVEL"

# API log storage
CACHE_DIR_ENV_VAR = "APILOGS_CACHE_DIR"
API_LOGS_DIR_NAME = "api-logs"
API_LOG_FILE_PREFIX = "api-log-"
API_LOG_FILE_EXTENSION = ".jsonl"
RECOGNIZED_LOG_EXTENSIONS = (".log", ".jsonl")
TAIL_LINES_TO_SHOW = 20

# Sensitive data keys for sanitization (exact, case-sensitive matches)
SENSITIVE_KEYS = (
    "api_key",
    "apiKey",
    "authorization",
    "Authorization",
    "token",
    "password",
    "key",
)
REDACTION_MARKER = "***REDACTED***"
UNSANITIZABLE_PLACEHOLDER = {"sanitized": "[Object could not be safely sanitized]"}

# Body placeholders
REQUEST_BODY_UNREADABLE = "[Could not read request body]"
RESPONSE_BODY_UNREADABLE = "[Could not read response body]"

# Service classification, checked in order; first match wins
SERVICE_PATTERNS = (
    (("anthropic.com", "claude"), "anthropic"),
    (("openai.com", "oai"), "openai"),
    (("anthropic-bedrock",), "anthropic-bedrock"),
    (("vertex-ai",), "anthropic-vertex"),
    (("amazonaws.com",), "aws"),
    (("google",), "google"),
)
UNKNOWN_SERVICE = "unknown"
