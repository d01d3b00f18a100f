"""Exception types shared across gdinsight components."""


class ScanError(OSError):
    """Raised when the directory scanner cannot open the requested root."""


class ReportError(ValueError):
    """Raised when a report is requested in an unknown format."""


__all__ = ["ReportError", "ScanError"]
