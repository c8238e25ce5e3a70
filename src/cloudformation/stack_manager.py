"""
CloudFormation stack management operations.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

import boto3
from botocore.exceptions import ClientError

from .errors import is_stack_not_found
from .outputs import get_stack_output
from .reconciler import ReconcileOutcome, StackReconciler
from .resolver import StackResolver
from .waiter import CloudFormationWaiter, StackWaiter

if TYPE_CHECKING:
    from config import DeployConfig, StackConfig

logger = logging.getLogger(__name__)


@dataclass
class DeployResult:
    """Result of a stack deployment."""
    stack_name: str
    outcome: ReconcileOutcome
    output_value: str

    @property
    def changed(self) -> bool:
        """Check if the deployment modified the stack."""
        return self.outcome == ReconcileOutcome.APPLIED


class StackManager:
    """Manage the deploy role CloudFormation stack."""

    def __init__(
        self,
        config: Union["DeployConfig", "StackConfig"],
        session: Optional[boto3.Session] = None,
        waiter: Optional[StackWaiter] = None,
    ):
        """
        Initialize stack manager.

        Args:
            config: Deployment configuration, or a StackConfig for read-only use
            session: AWS session (created from the config if not provided)
            waiter: Stack waiter (polls CloudFormation if not provided)
        """
        self.config = config
        self.session = session or config.create_session()
        self.cloudformation = self.session.client("cloudformation")

        self.resolver = StackResolver(self.cloudformation)
        self.waiter = waiter or CloudFormationWaiter(
            self.cloudformation,
            delay=config.waiter_delay,
            max_attempts=config.waiter_max_attempts,
        )
        self.reconciler = StackReconciler(
            self.cloudformation, self.waiter, resolver=self.resolver
        )

    @property
    def stack_name(self) -> str:
        return self.config.stack_name

    def deploy(self, template_body: str) -> DeployResult:
        """Reconcile the stack with the template and return the configured output.

        Remote errors (including waiter failures and timeouts) are raised
        unchanged; a missing output raises OutputNotFoundError.
        """
        outcome = self.reconciler.reconcile(
            self.stack_name,
            template_body,
            self.config.parameters(),
            tags=self.config.tags,
        )

        logger.info(f"Retrieving output {self.config.output_key} of {self.stack_name}")
        value = get_stack_output(
            self.cloudformation, self.stack_name, self.config.output_key
        )
        return DeployResult(stack_name=self.stack_name, outcome=outcome, output_value=value)

    def get_stack_status(self, stack_name: Optional[str] = None) -> Optional[str]:
        """Get current stack status, or None if the stack does not exist."""
        try:
            response = self.cloudformation.describe_stacks(
                StackName=stack_name or self.stack_name
            )
            if response["Stacks"]:
                return str(response["Stacks"][0]["StackStatus"])
        except ClientError as e:
            if is_stack_not_found(e):
                return None
            raise
        return None

    def get_stack_outputs(self, stack_name: Optional[str] = None) -> Dict[str, str]:
        """Get all outputs from the stack."""
        response = self.cloudformation.describe_stacks(
            StackName=stack_name or self.stack_name
        )
        outputs = {}
        if response["Stacks"]:
            for output in response["Stacks"][0].get("Outputs", []):
                outputs[output["OutputKey"]] = output["OutputValue"]
        return outputs

    def get_failed_events(self, stack_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """List failed resource events, most recent first, to explain a failed wait."""
        response = self.cloudformation.describe_stack_events(
            StackName=stack_name or self.stack_name
        )

        failed = []
        for event in response["StackEvents"]:
            if event.get("ResourceStatus", "").endswith("_FAILED"):
                failed.append(
                    {
                        "logical_id": event["LogicalResourceId"],
                        "resource_type": event["ResourceType"],
                        "status": event["ResourceStatus"],
                        "reason": event.get("ResourceStatusReason", "No reason provided"),
                        "timestamp": str(event["Timestamp"]),
                    }
                )
        return failed
