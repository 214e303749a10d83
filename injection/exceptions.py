"""
DocForge Injection Errors

Fatal errors abort a single document's injection and leave no output.
Warnings are logged by the caller and never raised by the core.
"""


class InjectionError(Exception):
    """Base class for section injection failures."""
    pass


class MalformedInputError(InjectionError):
    """
    Raised when the source container cannot be used.

    Either the bytes are not a ZIP archive, or the archive has no
    primary markup part (word/document.xml).
    """

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class EmptyHeaderSetWarning(UserWarning):
    """No section header candidates were found; injection should be skipped."""
    pass
