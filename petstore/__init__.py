"""Petstore - sample REST API over an in-memory collection of pets.

The service exposes CRUD-style endpoints under ``/api/pet`` and publishes a
fully annotated OpenAPI document for them.

Architecture Overview:
- **API Layer**: FastAPI routes, middleware, response negotiation
- **Core Layer**: Configuration, logging, exceptions, tracing
- **Domain Layer**: The Pet entity and its filtering predicates
- **Infrastructure Layer**: Map-backed repositories and sample data
"""
