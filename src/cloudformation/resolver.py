"""
Stack existence resolution.
"""

import logging
from enum import Enum
from typing import Any

from botocore.exceptions import ClientError

from .errors import is_stack_not_found

logger = logging.getLogger(__name__)


class StackState(Enum):
    """Whether a stack is present in CloudFormation."""
    EXISTS = "exists"
    ABSENT = "absent"


class StackResolver:
    """Determine whether a named stack currently exists."""

    def __init__(self, cloudformation: Any):
        """
        Initialize stack resolver.

        Args:
            cloudformation: boto3 CloudFormation client
        """
        self.cloudformation = cloudformation

    def resolve(self, stack_name: str) -> StackState:
        """
        Look the stack up by name.

        Only the "stack does not exist" validation error is treated as an
        answer; every other error is raised unchanged.
        """
        if not stack_name:
            raise ValueError("Stack name must not be empty")

        try:
            self.cloudformation.describe_stacks(StackName=stack_name)
        except ClientError as e:
            if is_stack_not_found(e):
                logger.debug(f"Stack {stack_name} does not exist yet")
                return StackState.ABSENT
            raise

        logger.debug(f"Stack {stack_name} exists")
        return StackState.EXISTS
