"""Clients for the external object storage, document database and account APIs.

Actions receive these as explicit dependencies so tests can substitute
in-memory fakes.
"""

from .account import SessionAccount
from .base import BackendClient
from .databases import DocumentDatabase
from .storage import UNIQUE_ID, ObjectStorage

__all__ = [
    "UNIQUE_ID",
    "BackendClient",
    "DocumentDatabase",
    "ObjectStorage",
    "SessionAccount",
]
