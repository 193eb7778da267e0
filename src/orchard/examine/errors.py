"""Exceptions that abort a bundle analysis."""


class ExamineError(Exception):
    """Base class for failures that stop the examine pipeline."""


class DownloadError(ExamineError):
    """The bundle attachment could not be downloaded."""


class ExtractionError(ExamineError):
    """The bundle is not a readable archive or could not be written to disk."""
