"""
Tests for configuration management.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from cloudformation.errors import ConfigurationError
from config import (
    DeployConfig,
    StackConfig,
    build_config,
    configure_logging,
    load_config_file,
    stack_name_for_repository,
    validate_repository,
)


class TestStackNaming:
    """Test stack name derivation."""

    def test_stack_name_for_repository(self):
        """Test that the repository is normalized into the stack name."""
        assert stack_name_for_repository("acme/widgets") == "github-deploy-acme-widgets"

    def test_stack_name_normalizes_characters(self):
        """Test that non alphanumeric characters become dashes and case is lowered."""
        assert stack_name_for_repository("My_Org/Repo.JS") == "github-deploy-my-org-repo-js"

    def test_validate_repository(self):
        """Test repository validation."""
        assert validate_repository("acme/widgets") == "acme/widgets"

        with pytest.raises(ConfigurationError, match="Missing the --repo option"):
            validate_repository(None)

        with pytest.raises(ConfigurationError, match="with a slash"):
            validate_repository("widgets")


class TestDeployConfig:
    """Test DeployConfig dataclass."""

    def test_default_initialization(self):
        """Test creating config with only a repository."""
        config = DeployConfig(repository="acme/widgets")

        assert config.stack_name == "github-deploy-acme-widgets"
        assert config.region == "us-east-1"
        assert config.profile is None
        assert config.output_key == "Role"
        assert config.waiter_delay == 30
        assert config.waiter_max_attempts == 120

    def test_stack_name_override(self):
        """Test that an explicit stack name wins over the derived one."""
        config = DeployConfig(repository="acme/widgets", stack_name="custom-stack")
        assert config.stack_name == "custom-stack"

    def test_invalid_repository(self):
        """Test that a repository without owner is rejected."""
        with pytest.raises(ConfigurationError):
            DeployConfig(repository="widgets")

    def test_parameters(self):
        """Test the submitted template parameters."""
        config = DeployConfig(repository="acme/widgets")
        assert config.parameters() == {"FullRepoName": "acme/widgets"}

        config = DeployConfig(
            repository="acme/widgets",
            oidc_provider_arn="arn:aws:iam::123456789012:oidc-provider/token.actions.githubusercontent.com",
            managed_policy_arn="arn:aws:iam::aws:policy/PowerUserAccess",
        )
        assert config.parameters() == {
            "FullRepoName": "acme/widgets",
            "OIDCProviderArn": "arn:aws:iam::123456789012:oidc-provider/token.actions.githubusercontent.com",
            "ManagedPolicyArn": "arn:aws:iam::aws:policy/PowerUserAccess",
        }

    @patch("config.boto3.Session")
    def test_create_session(self, mock_session):
        """Test that the session uses the configured region and profile."""
        DeployConfig(repository="acme/widgets", region="eu-west-1", profile="prod").create_session()
        mock_session.assert_called_once_with(region_name="eu-west-1", profile_name="prod")

    @patch("config.boto3.Session")
    def test_create_session_default_profile(self, mock_session):
        """Test that no profile is passed when none is configured."""
        DeployConfig(repository="acme/widgets").create_session()
        mock_session.assert_called_once_with(region_name="us-east-1")

    def test_from_dict_rejects_unknown_keys(self):
        """Test that typos in config files are reported."""
        with pytest.raises(ConfigurationError, match="regoin"):
            DeployConfig.from_dict({"repository": "acme/widgets", "regoin": "eu-west-1"})

    def test_from_dict_requires_repository(self):
        """Test that a config without repository fails validation, not with a TypeError."""
        with pytest.raises(ConfigurationError):
            DeployConfig.from_dict({"region": "eu-west-1"})

    def test_from_dict_rejects_wrong_types(self):
        """Test that badly typed YAML values are configuration errors."""
        with pytest.raises(ConfigurationError, match="repository must be a string"):
            DeployConfig.from_dict({"repository": ["acme/widgets"]})

        with pytest.raises(ConfigurationError, match="tags must be a mapping"):
            DeployConfig.from_dict({"repository": "acme/widgets", "tags": ["owner"]})

        with pytest.raises(ConfigurationError, match="waiter_delay must be an integer"):
            DeployConfig.from_dict({"repository": "acme/widgets", "waiter_delay": "30"})

    def test_from_dict_stringifies_tag_values(self):
        """Test that YAML numbers in tags are submitted as strings."""
        config = DeployConfig.from_dict({"repository": "acme/widgets", "tags": {"cost-center": 42}})
        assert config.tags == {"cost-center": "42"}

    def test_from_dict_validates_repository_once(self):
        """Test that repository validation runs a single time per config."""
        with patch("config.validate_repository", return_value="acme/widgets") as mock_validate:
            DeployConfig.from_dict({"repository": "acme/widgets"})

        mock_validate.assert_called_once_with("acme/widgets")


class TestStackConfig:
    """Test StackConfig for read-only commands."""

    def test_defaults(self):
        """Test region and waiter defaults."""
        config = StackConfig(stack_name="custom-stack")

        assert config.region == "us-east-1"
        assert config.waiter_delay == 30
        assert config.waiter_max_attempts == 120

    @patch("config.boto3.Session")
    def test_create_session(self, mock_session):
        """Test that the session uses the configured region and profile."""
        StackConfig(stack_name="custom-stack", region="eu-west-1", profile="prod").create_session()
        mock_session.assert_called_once_with(region_name="eu-west-1", profile_name="prod")


class TestConfigureLogging:
    """Test logging setup."""

    @patch("config.logging.basicConfig")
    def test_verbose_enables_debug(self, mock_basic_config):
        """Test that verbose logging lowers the root level to DEBUG."""
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging(verbose=True)
            assert root.level == logging.DEBUG
            configure_logging(verbose=False)
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)


class TestConfigFile:
    """Test YAML configuration files."""

    def test_load_config_file(self, tmp_path: Path):
        """Test loading a config file with dashed keys."""
        config_file = tmp_path / "deploy.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "repository": "acme/widgets",
                    "region": "eu-west-1",
                    "oidc-provider-arn": "arn:aws:iam::123456789012:oidc-provider/x",
                    "tags": {"owner": "platform"},
                }
            )
        )

        data = load_config_file(config_file)

        assert data["repository"] == "acme/widgets"
        assert data["oidc_provider_arn"] == "arn:aws:iam::123456789012:oidc-provider/x"
        assert data["tags"] == {"owner": "platform"}

    def test_load_missing_file(self, tmp_path: Path):
        """Test that a missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config_file(tmp_path / "missing.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path):
        """Test that malformed YAML is a configuration error."""
        config_file = tmp_path / "deploy.yaml"
        config_file.write_text("repository: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config_file(config_file)

    def test_load_non_mapping(self, tmp_path: Path):
        """Test that a YAML list is rejected."""
        config_file = tmp_path / "deploy.yaml"
        config_file.write_text("- acme/widgets\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config_file(config_file)

    def test_build_config_overrides(self, tmp_path: Path):
        """Test that command line values override file values and None is ignored."""
        config_file = tmp_path / "deploy.yaml"
        config_file.write_text(
            yaml.dump({"repository": "acme/widgets", "region": "eu-west-1", "waiter_delay": 10})
        )

        config = build_config(config_file, region="us-west-2", profile=None)

        assert config.repository == "acme/widgets"
        assert config.region == "us-west-2"
        assert config.profile is None
        assert config.waiter_delay == 10

    def test_build_config_without_file(self):
        """Test building config from overrides only."""
        config = build_config(repository="acme/widgets", stack_name=None)
        assert config.stack_name == "github-deploy-acme-widgets"
