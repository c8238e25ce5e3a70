"""
GitHub Actions deploy role template.

Creates a CloudFormation template with:
- The GitHub Actions OIDC identity provider (unless an existing one is given)
- An IAM role assumable only by workflows of one repository
- A "Role" output holding the role ARN
"""

import json
from pathlib import Path
from typing import Any, Dict

from troposphere import (
    AWS_STACK_NAME,
    Equals,
    GetAtt,
    If,
    Output,
    Parameter,
    Ref,
    Sub,
    Template,
    iam,
)

TEMPLATE_PATH = Path(__file__).parent / "cloudformation.yml"

GITHUB_OIDC_URL = "https://token.actions.githubusercontent.com"
GITHUB_OIDC_AUDIENCE = "sts.amazonaws.com"
GITHUB_OIDC_THUMBPRINT = "6938fd4d98bab03faadb97b34396831e3780aea1"
DEFAULT_MANAGED_POLICY_ARN = "arn:aws:iam::aws:policy/AdministratorAccess"


def load_template() -> str:
    """Read the shipped template verbatim."""
    return TEMPLATE_PATH.read_text(encoding="utf-8")


class GitHubDeployRoleTemplate:
    """
    Template for a role that a GitHub repository assumes through OIDC.

    The shipped cloudformation.yml is the rendered output of this class.
    """

    def __init__(self) -> None:
        self.template = Template()
        self.template.set_version("2010-09-09")
        self.template.set_description(
            "IAM role allowing a GitHub repository to deploy to AWS from GitHub Actions"
        )
        self.resources: Dict[str, Any] = {}

        self._create_parameters()
        self._create_oidc_provider()
        self._create_role()
        self._create_outputs()

    def _create_parameters(self) -> None:
        """Create template parameters."""
        self.full_repo_name = self.template.add_parameter(
            Parameter(
                "FullRepoName",
                Type="String",
                AllowedPattern=".+/.+",
                Description="GitHub repository allowed to assume the role (owner/repo)",
            )
        )
        self.oidc_provider_arn = self.template.add_parameter(
            Parameter(
                "OIDCProviderArn",
                Type="String",
                Default="",
                Description="Existing GitHub OIDC provider ARN (created when empty)",
            )
        )
        self.managed_policy_arn = self.template.add_parameter(
            Parameter(
                "ManagedPolicyArn",
                Type="String",
                Default=DEFAULT_MANAGED_POLICY_ARN,
                Description="Managed policy attached to the role",
            )
        )
        self.template.add_condition(
            "CreateOIDCProvider", Equals(Ref(self.oidc_provider_arn), "")
        )

    def _create_oidc_provider(self) -> None:
        """Create the GitHub OIDC provider (one per account)."""
        provider = self.template.add_resource(
            iam.OIDCProvider(
                "GithubOidc",
                Condition="CreateOIDCProvider",
                Url=GITHUB_OIDC_URL,
                ClientIdList=[GITHUB_OIDC_AUDIENCE],
                ThumbprintList=[GITHUB_OIDC_THUMBPRINT],
            )
        )
        self.resources["oidc_provider"] = provider

    def _create_role(self) -> None:
        """Create the role trusted by the repository's workflows."""
        assume_role_policy = {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {
                        "Federated": If(
                            "CreateOIDCProvider",
                            Ref(self.resources["oidc_provider"]),
                            Ref(self.oidc_provider_arn),
                        )
                    },
                    "Action": "sts:AssumeRoleWithWebIdentity",
                    "Condition": {
                        "StringEquals": {
                            "token.actions.githubusercontent.com:aud": GITHUB_OIDC_AUDIENCE
                        },
                        "StringLike": {
                            "token.actions.githubusercontent.com:sub": Sub(
                                "repo:${FullRepoName}:*"
                            )
                        },
                    },
                }
            ],
        }

        role = self.template.add_resource(
            iam.Role(
                "Role",
                RoleName=Ref(AWS_STACK_NAME),
                AssumeRolePolicyDocument=assume_role_policy,
                ManagedPolicyArns=[Ref(self.managed_policy_arn)],
            )
        )
        self.resources["role"] = role

    def _create_outputs(self) -> None:
        """Create template outputs."""
        self.template.add_output(
            Output(
                "Role",
                Description="ARN of the role to assume from GitHub Actions",
                Value=GetAtt(self.resources["role"], "Arn"),
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        """Get template as dictionary."""
        return dict(json.loads(self.template.to_json()))

    def to_yaml(self) -> str:
        """Get template as YAML string, with long-form intrinsic functions."""
        return self.template.to_yaml(long_form=True)

    def to_json(self) -> str:
        """Get template as JSON string."""
        return self.template.to_json()
