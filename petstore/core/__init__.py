"""Cross-cutting functionality shared by every layer of the petstore.

- **config**: Pydantic settings with environment overrides
- **context**: Correlation ID storage for the current request
- **exceptions**: Error codes and the PetstoreError hierarchy
- **error_context**: Redaction of sensitive values before logging
- **logging**: Loguru setup and formatters
- **observability**: OpenTelemetry tracing
- **types**: Shared type aliases
"""
