"""
Error types raised by the bulk ingestion pipeline.

Parser errors abort the whole request; record errors are caught inside the
batch loop and turned into an ``errors[]`` entry.
"""


class IngestionError(Exception):
    """Base class for bulk ingestion errors"""


class UnsupportedFormatError(IngestionError):
    """File extension is not one of the accepted formats"""


class MalformedInputError(IngestionError):
    """File could not be decoded into a list of records"""


class RecordError(IngestionError):
    """Failure scoped to a single record; never aborts the batch"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordValidationError(RecordError):
    pass


class DuplicateRecordError(RecordError):
    pass


class PersistenceError(RecordError):
    pass
