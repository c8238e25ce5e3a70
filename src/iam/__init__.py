"""
IAM role template and identity utilities for GitHub Actions deployments.
"""

from .identity import get_account_id
from .role_template import GitHubDeployRoleTemplate, load_template

__all__ = [
    "GitHubDeployRoleTemplate",
    "get_account_id",
    "load_template",
]
