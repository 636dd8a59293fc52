"""Pydantic schemas used only at the HTTP boundary."""
