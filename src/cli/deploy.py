#!/usr/bin/env python3
"""
Deployment CLI commands.
"""

import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import click
from botocore.exceptions import WaiterError

from cloudformation import (
    REMOTE_ERRORS,
    ConfigurationError,
    OutputNotFoundError,
    StackManager,
)
from config import DeployConfig, build_config, configure_logging
from iam import GitHubDeployRoleTemplate, get_account_id, load_template

WORKFLOW_SNIPPET = """\
# ...
permissions:
    id-token: write # This is required for requesting the JWT
    contents: read  # This is required for actions/checkout
jobs:
    deploy:
        steps:
            # ...
            -   name: Configure AWS credentials
                uses: aws-actions/configure-aws-credentials@v4
                with:
                    role-to-assume: {role_arn}
                    role-session-name: github-deploy
                    aws-region: {region}"""


def _fail(message: str, error: Optional[BaseException] = None) -> NoReturn:
    """Report an error and exit with a non-zero status."""
    click.echo(f"❌ {message}", err=True)
    if error is not None:
        click.echo(f"\n{error}", err=True)
    sys.exit(1)


def _print_failed_events(manager: StackManager) -> None:
    """Show the failed resources of the stack after a failed wait."""
    try:
        events: List[dict] = manager.get_failed_events()
    except REMOTE_ERRORS as e:
        click.echo(f"⚠️  Could not retrieve stack events: {e}", err=True)
        return

    if events:
        click.echo("\nFailed resources:", err=True)
        for event in events:
            click.echo(
                f"  - {event['logical_id']} ({event['resource_type']}): {event['reason']}",
                err=True,
            )


def format_workflow_snippet(role_arn: str, region: str) -> str:
    """Get the GitHub Actions snippet that assumes the deployed role."""
    return WORKFLOW_SNIPPET.format(role_arn=role_arn, region=region)


@click.command()
@click.option(
    "--repo",
    "-r",
    "repository",
    help="GitHub repository authorized to deploy (for example: my-org/my-repo)",
)
@click.option("--stack", "-s", "stack_name", help="CloudFormation stack name override")
@click.option("--region", help="AWS region (default: us-east-1)")
@click.option("--profile", help="AWS profile to use")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    help="YAML configuration file",
)
@click.option("--oidc-provider-arn", help="Existing GitHub OIDC provider ARN to reuse")
@click.option("--policy-arn", "managed_policy_arn", help="Managed policy attached to the role")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def deploy(
    repository: Optional[str],
    stack_name: Optional[str],
    region: Optional[str],
    profile: Optional[str],
    config_file: Optional[str],
    oidc_provider_arn: Optional[str],
    managed_policy_arn: Optional[str],
    yes: bool,
    verbose: bool,
) -> None:
    """Create or update the IAM role a GitHub repository deploys with."""
    if verbose:
        configure_logging(verbose=True)

    try:
        config: DeployConfig = build_config(
            config_file,
            repository=repository,
            stack_name=stack_name,
            region=region,
            profile=profile,
            oidc_provider_arn=oidc_provider_arn,
            managed_policy_arn=managed_policy_arn,
        )
    except ConfigurationError as e:
        _fail(str(e))

    try:
        session = config.create_session()
        account_id = get_account_id(session)
    except REMOTE_ERRORS as e:
        _fail("Failed to get AWS account ID", e)

    click.echo(
        f"The {config.repository} GitHub repository will be authorized to access "
        f"AWS account {account_id} in {config.region}.\n"
        f'This will be done by deploying an IAM role using CloudFormation '
        f'(stack name: "{config.stack_name}") using the {config.profile or "default"} profile.\n'
    )
    if not yes and not click.confirm("Do you want to continue?", default=False):
        click.echo("Aborted")
        return
    click.echo()

    manager = StackManager(config, session=session)

    click.echo("🚀 Deploying AWS role...")
    try:
        result = manager.deploy(load_template())
    except WaiterError as e:
        click.echo("❌ Deployment failed", err=True)
        click.echo(f"\n{e}", err=True)
        _print_failed_events(manager)
        sys.exit(1)
    except OutputNotFoundError as e:
        _fail("Role deployed but its ARN is missing from the stack outputs", e)
    except REMOTE_ERRORS as e:
        _fail("Deployment failed", e)
    except KeyboardInterrupt:
        _fail(
            "Interrupted. The stack operation continues in CloudFormation, "
            "run the same command again to resume."
        )

    if result.changed:
        click.echo("✅ Role deployed")
    else:
        click.echo("✅ Role already up to date, no changes were needed")

    click.echo()
    click.echo(f"Role ARN: {result.output_value}")
    click.echo()
    click.echo(
        "You can now add these lines to your GitHub Actions file "
        "(for example .github/workflows/deploy.yml):\n"
    )
    click.echo(format_workflow_snippet(result.output_value, config.region))


@click.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Output format",
)
@click.option("--output", "-o", help="Output file path (defaults to stdout)")
def template(output_format: str, output: Optional[str]) -> None:
    """Generate the deploy role CloudFormation template."""
    role_template = GitHubDeployRoleTemplate()
    content = role_template.to_yaml() if output_format == "yaml" else role_template.to_json()

    if output:
        Path(output).write_text(content, encoding="utf-8")
        click.echo(f"✅ Template written to {output}")
    else:
        click.echo(content)
