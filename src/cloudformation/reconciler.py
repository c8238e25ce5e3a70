"""
Create-or-update reconciliation of a CloudFormation stack.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from .errors import is_no_updates
from .resolver import StackResolver, StackState
from .waiter import Operation, StackWaiter

logger = logging.getLogger(__name__)

# The template creates a named IAM role
CAPABILITIES = ["CAPABILITY_NAMED_IAM"]


class ReconcileOutcome(Enum):
    """Result of a successful reconciliation."""
    APPLIED = "applied"
    NO_CHANGES = "no_changes"


class StackReconciler:
    """Bring a stack in line with a template by creating or updating it."""

    def __init__(
        self,
        cloudformation: Any,
        waiter: StackWaiter,
        resolver: Optional[StackResolver] = None,
    ):
        """
        Initialize stack reconciler.

        Args:
            cloudformation: boto3 CloudFormation client
            waiter: Waiter used to block until the operation completes
            resolver: Stack resolver (built from the client if not provided)
        """
        self.cloudformation = cloudformation
        self.waiter = waiter
        self.resolver = resolver or StackResolver(cloudformation)

    def reconcile(
        self,
        stack_name: str,
        template_body: str,
        parameters: Dict[str, str],
        tags: Optional[Dict[str, str]] = None,
    ) -> ReconcileOutcome:
        """
        Create the stack if it is absent, update it otherwise, then wait.

        Args:
            stack_name: Name of the CloudFormation stack
            template_body: Full template, submitted verbatim
            parameters: Full parameter set
            tags: Optional stack tags

        Returns:
            APPLIED once the waiter confirms completion, or NO_CHANGES if
            CloudFormation reported that the stack is already up to date
        """
        state = self.resolver.resolve(stack_name)
        operation = Operation.CREATE if state == StackState.ABSENT else Operation.UPDATE

        if operation == Operation.CREATE:
            submit = self.cloudformation.create_stack
        else:
            submit = self.cloudformation.update_stack

        request: Dict[str, Any] = {
            "StackName": stack_name,
            "TemplateBody": template_body,
            "Capabilities": CAPABILITIES,
            "Parameters": self.prepare_parameters(parameters),
        }
        if tags:
            request["Tags"] = [{"Key": k, "Value": str(v)} for k, v in tags.items()]

        logger.info(f"Submitting stack {operation.value} for {stack_name}")
        try:
            submit(**request)
        except ClientError as e:
            if is_no_updates(e):
                logger.info(f"No updates are needed for stack {stack_name}")
                return ReconcileOutcome.NO_CHANGES
            raise

        self.waiter.wait(stack_name, operation)
        logger.info(f"Stack {operation.value} of {stack_name} complete")
        return ReconcileOutcome.APPLIED

    @staticmethod
    def prepare_parameters(parameters: Dict[str, str]) -> List[Dict[str, str]]:
        """Convert a parameter mapping to the CloudFormation list format."""
        return [
            {"ParameterKey": key, "ParameterValue": value}
            for key, value in parameters.items()
        ]
