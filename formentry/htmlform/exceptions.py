import dataclasses


class FormEntryException(Exception):
    """Raised when a form element is configured with parameters it cannot use."""

    def __init__(self, message="", code=None):
        super().__init__(message)
        self.code = code


class BadFormDesignException(FormEntryException):
    pass


class InvalidSubmissionException(Exception):
    """Raised when a submitted value cannot be read by its widget."""

    def __init__(self, message="", code=None):
        super().__init__(message)
        self.code = code


@dataclasses.dataclass
class FormSubmissionError:
    widget: object
    message: str
