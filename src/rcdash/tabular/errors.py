"""Errors raised while decoding an uploaded file."""


class TabularError(ValueError):
    """File could not be read as a table."""

    code = "TabularError"


class UnsupportedFileTypeError(TabularError):
    """File extension is not one of the supported formats."""

    code = "UnsupportedFileType"


class EmptyFileError(TabularError):
    """File contains no rows at all."""

    code = "EmptyFile"


class NoWorksheetError(TabularError):
    """Workbook has no worksheets."""

    code = "NoWorksheet"
