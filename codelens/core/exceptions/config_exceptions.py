"""Errors raised while loading or validating configuration."""

from typing import List, Optional
from .base_exceptions import CodeLensError


class ConfigurationError(CodeLensError):
    """Configuration could not be loaded or used."""

    default_error_code = 'CONFIG_ERROR'

    def __init__(self, message: str, config_section: Optional[str] = None,
                 config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_section: Section the problem was found in (``api``, ``scan``...)
            config_key: Key within the section
            **kwargs: Passed to CodeLensException
        """
        super().__init__(message, **kwargs)
        self.add_detail('config_section', config_section)
        self.add_detail('config_key', config_key)

        self.config_section = config_section
        self.config_key = config_key


class ConfigValidationError(ConfigurationError):
    """The merged configuration failed validation."""

    default_error_code = 'CONFIG_VALIDATION_ERROR'
    default_suggestion = 'Check the configuration file and CODELENS_* environment variables'

    def __init__(self, validation_errors: List[str], **kwargs):
        super().__init__(
            f"Configuration validation failed with {len(validation_errors)} errors: "
            f"{'; '.join(validation_errors)}",
            **kwargs
        )
        self.add_detail('validation_errors', validation_errors)

        self.validation_errors = validation_errors


class ConfigFileNotFoundError(ConfigurationError):
    """An explicitly requested configuration file does not exist."""

    default_error_code = 'CONFIG_FILE_NOT_FOUND'
    default_suggestion = 'Pass an existing YAML file to --config or unset CODELENS_CONFIG'

    def __init__(self, file_path: str, **kwargs):
        super().__init__(f"Configuration file not found: {file_path}", **kwargs)
        self.add_detail('file_path', file_path)

        self.file_path = file_path


class ConfigFileFormatError(ConfigurationError):
    """The configuration file is not a YAML mapping."""

    default_error_code = 'CONFIG_FORMAT_ERROR'
    default_suggestion = 'Check YAML syntax; the top level must be a mapping of sections'

    def __init__(self, file_path: str, format_error: str, **kwargs):
        """Initialize config file format error.

        Args:
            file_path: File that failed to parse
            format_error: Parser message or structural problem
            **kwargs: Passed to CodeLensException
        """
        super().__init__(f"Invalid configuration file format in {file_path}: {format_error}",
                         **kwargs)
        self.add_detail('file_path', file_path)
        self.add_detail('format_error', format_error)

        self.file_path = file_path
        self.format_error = format_error
