"""
Domain Value Objects

Immutable value objects that encapsulate domain concepts with validation.
"""
from .confidence import Confidence
from .document_type import DOCUMENT_TYPE_SYNONYMS, DocumentType

__all__ = [
    'Confidence',
    'DocumentType',
    'DOCUMENT_TYPE_SYNONYMS',
]
