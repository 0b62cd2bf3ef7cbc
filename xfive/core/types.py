"""Core data types for the xfive application."""

from typing import Any, Optional, TypedDict


class FirestoreDocument(TypedDict, total=False):
    """Fields every stored document may carry."""

    id: str


class APIResponse(TypedDict):
    """Envelope for every JSON answer of the admin API."""

    success: bool
    message: str
    # Dict for single objects, list for collections, None for bare acks
    data: Optional[Any]
