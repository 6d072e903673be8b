"""Exception hierarchy for mdbook-infobox.

Imported by every other module, so it stays free of project imports.
"""


class InfoboxError(Exception):
    """Base exception for all infobox errors."""


class InfoboxParseError(InfoboxError):
    """Raised when the contents of an infobox block do not follow the grammar."""


class InfoboxTitleError(InfoboxParseError):
    """Raised when the leading title heading is missing or malformed."""


class InfoboxFieldError(InfoboxParseError):
    """Raised when a field heading contains anything other than plain text."""


class InfoboxImageError(InfoboxParseError):
    """Raised when an image section is not a well-formed start/text/end triple."""


class InfoboxConfigError(InfoboxError):
    """Raised for an invalid ``[preprocessor.infobox]`` table."""


class InfoboxInputError(InfoboxError):
    """Raised when mdBook hands over a payload that is not ``[context, book]``."""
