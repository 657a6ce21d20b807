"""Error taxonomy and error-handling helpers for the recipe pipeline.

Every pipeline-level failure is a RecipeServiceError carrying a message that
can be shown to the user as-is. The presentation layer catches the base class,
shows the message and offers a manual retry.
"""

import logging


class RecipeServiceError(Exception):
    """Base class for user-facing recipe pipeline failures."""

    default_message = "An unexpected error occurred."

    def __init__(self, message: str = None) -> None:
        super().__init__(message or self.default_message)


class ConfigurationError(RecipeServiceError, ValueError):
    """Required configuration is missing or invalid. Fatal at startup."""

    default_message = "Invalid configuration."


class InvalidRecipeResponseError(RecipeServiceError):
    """Recipe JSON was malformed, not a list, or violated the schema."""

    default_message = "The AI returned an invalid recipe format. Please try again."


class RecipeServiceUnavailableError(RecipeServiceError):
    """The text-generation call itself failed or timed out."""

    default_message = "Failed to fetch recipe details. The service might be temporarily unavailable."


class ImageGenerationFailedError(RecipeServiceError):
    """Recipes were found but not a single image could be generated."""

    default_message = (
        "Successfully fetched recipe details, but failed to generate any images. Please try again."
    )


class InvalidTranslationError(RecipeServiceError):
    """Translation JSON was malformed or had the wrong shape."""

    default_message = "The AI returned an invalid translation format."


def log_error(logger: logging.Logger, operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level. Helper to reduce duplication.

    Args:
        logger: Logger to write to.
        operation_name: Description for logging.
        exception: Exception that occurred.
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


def safe_execute_sync(
    logger: logging.Logger,
    func,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
    reraise: bool = False,
):
    """Safely execute sync operation with consistent error logging.

    Used for optional operations that should degrade gracefully, such as
    loading a corrupted favorites entry or writing the favorites file.

    Args:
        logger: Logger to write failures to.
        func: Callable to execute (no args).
        operation_name: Description for logging.
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.

    Returns:
        Result of func if successful, default_return on exception if reraise=False.

    Raises:
        Exception: Original exception if reraise=True.
    """
    try:
        return func()
    except Exception as e:
        log_error(logger, operation_name, e, log_level)
        if reraise:
            raise
        return default_return
