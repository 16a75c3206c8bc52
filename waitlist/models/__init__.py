"""Pydantic models for the Teed waitlist API."""
