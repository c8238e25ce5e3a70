"""
Blocking waits on CloudFormation stack operations.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Operation(Enum):
    """Mutating stack operation, named after its waiter suffix."""
    CREATE = "create"
    UPDATE = "update"

    @property
    def waiter_name(self) -> str:
        return f"stack_{self.value}_complete"


class StackWaiter(ABC):
    """Block until a stack operation reaches a terminal state."""

    @abstractmethod
    def wait(self, stack_name: str, operation: Operation) -> None:
        """
        Wait for the operation to finish.

        Must raise if the stack reaches a failure state or the wait times out.
        """


class CloudFormationWaiter(StackWaiter):
    """Poll CloudFormation with the built-in boto3 stack waiters."""

    def __init__(self, cloudformation: Any, delay: int = 30, max_attempts: int = 120):
        """
        Initialize waiter.

        Args:
            cloudformation: boto3 CloudFormation client
            delay: Seconds between polls
            max_attempts: Number of polls before giving up
        """
        self.cloudformation = cloudformation
        self.delay = delay
        self.max_attempts = max_attempts

    def wait(self, stack_name: str, operation: Operation) -> None:
        logger.info(
            f"Waiting for stack {operation.value} of {stack_name} "
            f"(up to {self.delay * self.max_attempts}s)"
        )
        waiter = self.cloudformation.get_waiter(operation.waiter_name)
        # Raises botocore.exceptions.WaiterError on failure or timeout
        waiter.wait(
            StackName=stack_name,
            WaiterConfig={"Delay": self.delay, "MaxAttempts": self.max_attempts},
        )
