"""Response rendering and content negotiation helpers."""
