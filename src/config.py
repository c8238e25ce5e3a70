"""
Configuration management for GitHub deploy role provisioning.

Handles the repository, stack naming, AWS session and template parameters.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import boto3
import yaml

from cloudformation.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
STACK_NAME_PREFIX = "github-deploy-"

# boto3's own stack_*_complete waiter defaults
DEFAULT_WAITER_DELAY = 30
DEFAULT_WAITER_MAX_ATTEMPTS = 120

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for the command line."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def create_session(region: str, profile: Optional[str] = None) -> boto3.Session:
    """Create AWS session for a region and optional profile."""
    session_args = {"region_name": region}
    if profile:
        session_args["profile_name"] = profile
    return boto3.Session(**session_args)


def validate_repository(repository: Optional[str]) -> str:
    """Check that a full repository name (owner/repo) was given."""
    if not repository:
        raise ConfigurationError(
            "Missing the --repo option: this is the name of the GitHub repository "
            "that will be authorized to deploy to AWS (for example: --repo my-org/my-repo)"
        )
    if "/" not in repository:
        raise ConfigurationError(
            "The --repo option must contain a full repository name with a slash, "
            "for example: --repo my-org/my-repo"
        )
    return repository


def stack_name_for_repository(repository: str) -> str:
    """Generate a unique stack name that contains the normalized repository name."""
    return STACK_NAME_PREFIX + re.sub(r"[^a-zA-Z0-9]", "-", repository).lower()


@dataclass
class DeployConfig:
    """Configuration for a single deploy role stack."""

    repository: str
    stack_name: Optional[str] = None
    region: str = DEFAULT_REGION
    profile: Optional[str] = None

    # Template contract
    output_key: str = "Role"
    oidc_provider_arn: Optional[str] = None
    managed_policy_arn: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)

    waiter_delay: int = DEFAULT_WAITER_DELAY
    waiter_max_attempts: int = DEFAULT_WAITER_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        validate_repository(self.repository)
        if not self.stack_name:
            self.stack_name = stack_name_for_repository(self.repository)
        if not self.region:
            self.region = DEFAULT_REGION

    def parameters(self) -> Dict[str, str]:
        """Get the CloudFormation parameters submitted with the template."""
        params = {"FullRepoName": self.repository}
        if self.oidc_provider_arn:
            params["OIDCProviderArn"] = self.oidc_provider_arn
        if self.managed_policy_arn:
            params["ManagedPolicyArn"] = self.managed_policy_arn
        return params

    def create_session(self) -> boto3.Session:
        """Create AWS session for the configured region and profile."""
        return create_session(self.region, self.profile)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployConfig":
        """Create config from dictionary, ignoring unset values."""
        known = cls.__dataclass_fields__
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = {k: v for k, v in data.items() if v is not None}
        for key in ("repository", "stack_name", "region", "profile", "output_key",
                    "oidc_provider_arn", "managed_policy_arn"):
            if key in values and not isinstance(values[key], str):
                raise ConfigurationError(f"{key} must be a string, got {values[key]!r}")
        for key in ("waiter_delay", "waiter_max_attempts"):
            if key in values and (
                isinstance(values[key], bool) or not isinstance(values[key], int)
            ):
                raise ConfigurationError(f"{key} must be an integer, got {values[key]!r}")
        if "tags" in values:
            if not isinstance(values["tags"], dict):
                raise ConfigurationError("tags must be a mapping of tag names to values")
            values["tags"] = {str(k): str(v) for k, v in values["tags"].items()}

        # __post_init__ reports a missing repository
        values.setdefault("repository", None)
        return cls(**values)


@dataclass
class StackConfig:
    """Location of an existing stack, for commands that only read it."""

    stack_name: str
    region: str = DEFAULT_REGION
    profile: Optional[str] = None
    waiter_delay: int = DEFAULT_WAITER_DELAY
    waiter_max_attempts: int = DEFAULT_WAITER_MAX_ATTEMPTS

    def create_session(self) -> boto3.Session:
        """Create AWS session for the configured region and profile."""
        return create_session(self.region, self.profile)


def load_config_file(config_file: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration values from a YAML file."""
    path = Path(config_file)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    logger.info(f"Loading configuration: {path}")
    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    # Accept dashed keys to mirror the CLI options
    return {key.replace("-", "_"): value for key, value in data.items()}


def build_config(
    config_file: Optional[Union[str, Path]] = None, **overrides: Any
) -> DeployConfig:
    """Merge a config file with command line overrides (overrides win)."""
    data: Dict[str, Any] = {}
    if config_file:
        data.update(load_config_file(config_file))
    data.update({k: v for k, v in overrides.items() if v is not None})
    return DeployConfig.from_dict(data)
