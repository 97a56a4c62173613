"""Core module for the pickabracket application."""

from .types import APIResponse, FirestoreDocument, api_response

__all__ = ["FirestoreDocument", "APIResponse", "api_response"]
