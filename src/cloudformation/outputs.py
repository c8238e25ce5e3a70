"""
Stack output lookup.
"""

from typing import Any

from .errors import OutputNotFoundError


def get_stack_output(cloudformation: Any, stack_name: str, output_key: str) -> str:
    """Read a single output value from a freshly described stack.

    The key must match exactly (case-sensitive).

    Raises:
        OutputNotFoundError: The stack has no outputs or none with this key
    """
    response = cloudformation.describe_stacks(StackName=stack_name)
    stacks = response.get("Stacks") or [{}]

    for output in stacks[0].get("Outputs") or []:
        if output.get("OutputKey") == output_key:
            return output["OutputValue"]

    raise OutputNotFoundError(stack_name, output_key)
