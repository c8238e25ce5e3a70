#!/usr/bin/env python3
"""Main CLI entry point for GitHub deploy role provisioning."""

import click

from config import configure_logging

from .cloudformation import status
from .deploy import deploy, template


@click.group()
@click.version_option(package_name="github-deploy-role")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Authorize a GitHub repository to deploy to AWS.

    Deploys an IAM role trusted through GitHub Actions OIDC with CloudFormation.
    """
    configure_logging(verbose)


cli.add_command(deploy, name="deploy")
cli.add_command(status, name="status")
cli.add_command(template, name="template")


if __name__ == "__main__":
    cli()
