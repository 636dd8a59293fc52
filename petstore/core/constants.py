"""Core application constants."""

# Time constants
MILLISECONDS_PER_SECOND = 1000

# Redaction
REDACTED = "[REDACTED]"
