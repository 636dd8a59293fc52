"""HTTP layer of the petstore.

- **main**: application factory and lifespan
- **routes**: the ``/api/pet`` router and its OpenAPI metadata
- **middleware**: correlation IDs, request logging, exception handlers
- **schemas**: the error response body
- **utils**: JSON/XML rendering and content negotiation
"""
