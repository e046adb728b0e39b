"""Status definitions and exceptions for ExpenseBoard.

This module provides:
    - Status: enumeration of possible application states
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., ServiceUnavailableException) raised by the api client and the forms
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()

    # Config status
    SettingsNotFound = enum.auto()
    SettingsInvalid = enum.auto()
    ApiUrlInvalid = enum.auto()

    # Request status
    ServiceUnavailable = enum.auto()
    RequestFailed = enum.auto()
    ResponseInvalid = enum.auto()

    # Input status
    ExpenseInvalid = enum.auto()
    ReceiptInvalid = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status. Please try again.',

    Status.SettingsNotFound: 'Could not find the settings file.',
    Status.SettingsInvalid: 'The settings file seems to be incomplete, or contains invalid values.',
    Status.ApiUrlInvalid: 'The API base url is not valid. Check the "api" section of the settings.',

    Status.ServiceUnavailable: 'The expense server is unavailable. Please check your connection.',
    Status.RequestFailed: 'The expense server rejected the request.',
    Status.ResponseInvalid: 'The expense server returned an unexpected response.',

    Status.ExpenseInvalid: 'Please fill in all required fields.',
    Status.ReceiptInvalid: 'The receipt image could not be attached.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, 'Unknown status')


class BaseStatusException(Exception):
    """Base exception for status-based errors in ExpenseBoard.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        self.message = message or ''
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)


class SettingsNotFoundException(BaseStatusException):
    """Exception raised when the settings file cannot be found."""
    status = Status.SettingsNotFound


class SettingsInvalidException(BaseStatusException):
    """Exception raised when the settings file is invalid or malformed."""
    status = Status.SettingsInvalid


class ApiUrlInvalidException(BaseStatusException):
    """Exception raised when the configured api base url is empty or malformed."""
    status = Status.ApiUrlInvalid


class ServiceUnavailableException(BaseStatusException):
    """Exception raised when the server cannot be reached or the request timed out."""
    status = Status.ServiceUnavailable


class RequestFailedException(BaseStatusException):
    """Exception raised when the server answers with a non-success status code.

    Attributes:
        status_code (int): The HTTP status code of the response, if known.
    """
    status = Status.RequestFailed

    def __init__(self, message: str = None, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class ResponseInvalidException(BaseStatusException):
    """Exception raised when a response body cannot be decoded or has the wrong shape."""
    status = Status.ResponseInvalid


class ExpenseInvalidException(BaseStatusException):
    """Exception raised when a new expense is missing required fields or has invalid values."""
    status = Status.ExpenseInvalid


class ReceiptInvalidException(BaseStatusException):
    """Exception raised when a receipt image is too large or cannot be read."""
    status = Status.ReceiptInvalid
