# Retrieval Exceptions module
from .retrieval_exceptions import (
    RetrievalError,
    InvalidRequestError,
    BrowserUnavailableError,
    ExtractionEmptyError,
    BrowserSessionStateError,
)

__all__ = [
    'RetrievalError',
    'InvalidRequestError',
    'BrowserUnavailableError',
    'ExtractionEmptyError',
    'BrowserSessionStateError',
]
