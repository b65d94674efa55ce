from __future__ import annotations


class ATSCheckerError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class UnsupportedFormatError(ATSCheckerError):
    def __init__(self, message: str = "Unsupported file format"):
        super().__init__(message, status_code=400)


class ParseFailureError(ATSCheckerError):
    def __init__(self, message: str = "Error parsing resume file"):
        super().__init__(message, status_code=422)


class RequestValidationFailed(ATSCheckerError):
    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message, status_code=status_code)


class StorageError(ATSCheckerError):
    def __init__(self, message: str = "Error accessing analysis storage"):
        super().__init__(message, status_code=500)
