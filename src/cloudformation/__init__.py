"""
CloudFormation stack reconciliation utilities.
"""

from .errors import (
    REMOTE_ERRORS,
    ConfigurationError,
    DeploymentError,
    OutputNotFoundError,
)
from .outputs import get_stack_output
from .reconciler import ReconcileOutcome, StackReconciler
from .resolver import StackResolver, StackState
from .stack_manager import DeployResult, StackManager
from .waiter import CloudFormationWaiter, Operation, StackWaiter

__all__ = [
    "REMOTE_ERRORS",
    "CloudFormationWaiter",
    "ConfigurationError",
    "DeployResult",
    "DeploymentError",
    "Operation",
    "OutputNotFoundError",
    "ReconcileOutcome",
    "StackManager",
    "StackReconciler",
    "StackResolver",
    "StackState",
    "StackWaiter",
    "get_stack_output",
]
