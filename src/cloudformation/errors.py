"""
Error types and CloudFormation error classification.

CloudFormation does not return a dedicated "not found" or "nothing to update"
error code: both surface as a generic ``ValidationError`` and can only be told
apart by their message. The matching is kept in this module so the rest of the
code never inspects error messages directly.
"""

from botocore.exceptions import BotoCoreError, ClientError

VALIDATION_ERROR_CODE = "ValidationError"
STACK_NOT_FOUND_MESSAGE = "does not exist"
NO_UPDATES_MESSAGE = "No updates are to be performed"

# Anything AWS raises that is not classified below is propagated unchanged
REMOTE_ERRORS = (ClientError, BotoCoreError)


class DeploymentError(Exception):
    """Base class for local deployment errors."""


class ConfigurationError(DeploymentError):
    """Invalid or missing configuration."""


class OutputNotFoundError(DeploymentError):
    """A stack deployed successfully but does not expose the expected output."""

    def __init__(self, stack_name: str, output_key: str):
        self.stack_name = stack_name
        self.output_key = output_key
        super().__init__(
            f"Could not find the {output_key!r} output in the outputs of stack "
            f"{stack_name}, did the deployment fail silently?"
        )


def _is_validation_error(error: Exception, message: str) -> bool:
    if not isinstance(error, ClientError):
        return False
    details = error.response.get("Error", {})
    return details.get("Code") == VALIDATION_ERROR_CODE and message in details.get(
        "Message", ""
    )


def is_stack_not_found(error: Exception) -> bool:
    """Check if a DescribeStacks error means the stack does not exist."""
    return _is_validation_error(error, STACK_NOT_FOUND_MESSAGE)


def is_no_updates(error: Exception) -> bool:
    """Check if a CreateStack/UpdateStack error means the stack is up to date."""
    return _is_validation_error(error, NO_UPDATES_MESSAGE)
