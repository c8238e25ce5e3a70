#!/usr/bin/env python3
"""
CloudFormation status CLI commands.
"""

import sys
from typing import Optional

import click

from cloudformation import REMOTE_ERRORS, ConfigurationError, StackManager
from config import DEFAULT_REGION, StackConfig, build_config


@click.command()
@click.option(
    "--repo",
    "-r",
    "repository",
    help="GitHub repository the role was deployed for",
)
@click.option("--stack", "-s", "stack_name", help="CloudFormation stack name override")
@click.option("--region", help="AWS region (default: us-east-1)")
@click.option("--profile", help="AWS profile to use")
def status(
    repository: Optional[str],
    stack_name: Optional[str],
    region: Optional[str],
    profile: Optional[str],
) -> None:
    """Show the deploy role stack status and outputs.

    The stack is given by --repo, by --stack, or by both when the stack
    name was overridden at deploy time.
    """
    if not repository and not stack_name:
        raise click.UsageError("Provide --repo or --stack")

    try:
        if repository:
            config = build_config(
                repository=repository, stack_name=stack_name, region=region, profile=profile
            )
        else:
            config = StackConfig(
                stack_name=stack_name, region=region or DEFAULT_REGION, profile=profile
            )
        manager = StackManager(config)

        stack_status = manager.get_stack_status()
        if not stack_status:
            click.echo(f"Stack {config.stack_name} does not exist")
            return

        status_color = (
            "green"
            if "COMPLETE" in stack_status and "ROLLBACK" not in stack_status
            else "red" if "FAILED" in stack_status else "yellow"
        )
        click.echo(f"Stack: {config.stack_name}")
        click.echo(f"Status: {click.style(stack_status, fg=status_color)}")

        outputs = manager.get_stack_outputs()
        if outputs:
            click.echo("\nOutputs:")
            for key, value in outputs.items():
                click.echo(f"  {key}: {value}")

    except (ConfigurationError, *REMOTE_ERRORS) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
