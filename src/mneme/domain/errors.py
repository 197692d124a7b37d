class MnemeError(Exception):
    """Base class for errors raised by mneme adapters and services."""


class RecordStoreError(MnemeError):
    """A review record store could not be read or written."""
