"""Pytest fixtures for construct and stack tests."""

import os
import sys

import pytest
from aws_cdk import App, Environment, Stack
from aws_cdk import aws_iam as iam

# Add cdk directory to path for stack imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "cdk"))

TEST_ACCOUNT = "123456789012"
TEST_REGION = "us-east-1"


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Pin the CDK default environment for all tests."""
    monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", TEST_ACCOUNT)
    monkeypatch.setenv("CDK_DEFAULT_REGION", TEST_REGION)


@pytest.fixture
def stack():
    """Create an empty stack bound to the test account and region."""
    app = App()
    return Stack(
        app,
        "TestStack",
        env=Environment(account=TEST_ACCOUNT, region=TEST_REGION),
    )


@pytest.fixture
def role(stack):
    """Create a role to grant permissions to."""
    return iam.Role(
        stack,
        "Role",
        assumed_by=iam.AccountRootPrincipal(),
    )
