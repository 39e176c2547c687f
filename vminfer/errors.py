# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer Error Hierarchy

Every fatal condition of the inference pipeline is an exception carrying
a message, a list of suggestions and a context dictionary. Only the
buffer size mismatch is non-fatal and is reported as a warning.

Error Categories:
- VMInferError: Base class for all vminfer errors
- BufferIOError: A buffer file could not be opened
- ModuleLoadError: The compiled artifact could not be loaded
- MissingEntryPointError: An expected exported function is absent
- ConfigurationError: Invalid model configuration

Warning Categories:
- SizeMismatchWarning: Buffer file size differs from the declared shape
"""

from typing import Optional


class VMInferError(Exception):
    """
    Base class for all vminfer errors.

    Attributes:
        message: Human-readable error message
        suggestions: List of suggestions to fix the error
        context: Optional context dictionary for debugging
    """

    def __init__(
        self,
        message: str,
        suggestions: Optional[list[str]] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.context = context or {}

        full_message = self._format_message()
        super().__init__(full_message)

    def _format_message(self) -> str:
        """Format the error message with suggestions."""
        lines = [self.message]

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"  {i}. {suggestion}")

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)


class BufferIOError(VMInferError, OSError):
    """
    A raw buffer file could not be opened.

    Also an ``OSError`` (``IOError``) so callers catching the builtin
    category see it.
    """

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = str(path)

        context = {"path": self.path}
        if reason:
            context["reason"] = reason

        super().__init__(
            message=f"Cannot open {self.path}",
            suggestions=[
                "Check that the file exists",
                "Check read permissions on the file",
            ],
            context=context,
        )


class ModuleLoadError(VMInferError):
    """
    Error loading the compiled model artifact.

    Raised when:
    - The artifact path does not exist
    - The file is not a loadable module for this platform
    - The runtime library needed to load it is not installed
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        backend: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
    ):
        self.path = str(path) if path is not None else None

        context = {}
        if path is not None:
            context["path"] = self.path
        if backend:
            context["backend"] = backend

        default_suggestions = [
            "Check the artifact path",
            "Rebuild the artifact for this platform and runtime version",
        ]

        super().__init__(
            message=f"Module load failed: {message}",
            suggestions=suggestions or default_suggestions,
            context=context,
        )


class MissingEntryPointError(VMInferError):
    """
    An expected function is not exported by the artifact or its VM module.

    Indicates an incompatible or corrupt artifact.
    """

    def __init__(self, symbol: str, path: Optional[str] = None):
        self.symbol = symbol
        self.path = str(path) if path is not None else None

        context = {"symbol": symbol}
        if path is not None:
            context["path"] = self.path

        super().__init__(
            message=f"`{symbol}` does not exist in file `{self.path}`",
            suggestions=[
                "Export the artifact as a Relax VM executable",
                "Check the entry function name of the model",
            ],
            context=context,
        )


class ConfigurationError(VMInferError):
    """
    Configuration or setup error.

    Raised when:
    - A preset or config file is unknown or malformed
    - Label table and output shape disagree
    - A device or allocator name cannot be parsed
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = str(config_value)

        super().__init__(
            message=f"Configuration error: {message}",
            suggestions=[
                "Check configuration parameters",
                "Run `vminfer presets` to list built-in models",
            ],
            context=context,
        )


class SizeMismatchWarning(UserWarning):
    """Buffer file size differs from the declared element count."""
