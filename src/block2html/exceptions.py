#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the block2html library.

This module defines the exception classes raised by block2html. The
conversion engine degrades gracefully wherever it can (a missing handler, a
failing hook or an SSR pass that matches nothing never abort a document), so
these exceptions surface only for invalid configuration, malformed input data,
or when strict mode asks for failures to propagate.

Exception Hierarchy
-------------------
- Block2HtmlError (base exception)

  - ValidationError (parameter/option validation)
    - ConfigError (configuration file loading)

  - MalformedBlockError (block data that cannot be turned into a Block)

  - RenderingError (handler or hook failure in strict mode)

"""

from typing import Any


class Block2HtmlError(Exception):
    """Base exception class for all block2html-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Block2HtmlError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigError(ValidationError):
    """Exception raised when a configuration file cannot be loaded.

    Parameters
    ----------
    message : str
        Description of the problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(
            message, parameter_name="config", parameter_value=config_path, original_error=original_error
        )
        self.config_path = config_path


class MalformedBlockError(Block2HtmlError):
    """Exception raised when block data does not follow the block schema.

    Parameters
    ----------
    message : str
        Description of the problem
    path : str, optional
        Location of the offending value inside the input (e.g. ``blocks[2].children[0]``)
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, path: str | None = None, original_error: Exception | None = None):
        """Initialize the malformed block error."""
        if path:
            message = f"{message} (at {path})"
        super().__init__(message, original_error=original_error)
        self.path = path


class RenderingError(Block2HtmlError):
    """Exception raised when a handler or hook fails and strict mode is enabled.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    block_type : str, optional
        Type of the block being rendered when the failure occurred
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, block_type: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error=original_error)
        self.block_type = block_type


__all__ = [
    "Block2HtmlError",
    "ValidationError",
    "ConfigError",
    "MalformedBlockError",
    "RenderingError",
]
