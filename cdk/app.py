#!/usr/bin/env python3
"""
CDK app for Secrets Manager database credentials.

This app defines two stacks, each synthesized only when its required
context is present:

SecretsStack - Creates generated database credentials, optionally attached
    to an RDS instance or cluster and rotated by an existing Lambda

IamPolicyStack - Grants an existing role read access to an existing secret

Usage:
    # Database credentials attached to an instance and rotated monthly
    cdk deploy SecretsStack \\
        --context secret_name="app/database-credentials" \\
        --context db_instance_identifier="app-database" \\
        --context rotation_lambda_arn="arn:aws:lambda:..."

    # Read access for a role, limited to the current version
    cdk deploy IamPolicyStack \\
        --context execution_role_arn="arn:aws:iam::..." \\
        --context secret_arn="arn:aws:secretsmanager:..." \\
        --context version_stages="AWSCURRENT"
"""

import logging
import os

import aws_cdk as cdk
from stacks import (
    CONTEXT_DB_CLUSTER_IDENTIFIER,
    CONTEXT_DB_INSTANCE_IDENTIFIER,
    CONTEXT_EXECUTION_ROLE_ARN,
    CONTEXT_KMS_KEY_ARN,
    CONTEXT_ROTATION_LAMBDA_ARN,
    CONTEXT_SECRET_ARN,
    CONTEXT_SECRET_DESCRIPTION,
    CONTEXT_SECRET_NAME,
    CONTEXT_USERNAME,
    CONTEXT_VERSION_STAGES,
    DEFAULT_USERNAME,
    IAM_POLICY_STACK_NAME,
    SECRETS_STACK_NAME,
    IamPolicyStack,
    SecretsStack,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_version_stages(value: str | None) -> list[str] | None:
    """Split a comma-separated context value into version stage labels."""
    if not value:
        return None
    stages = [stage.strip() for stage in value.split(",") if stage.strip()]
    return stages or None


app = cdk.App()

# Get configuration from context (passed via --context flags)
secret_name = app.node.try_get_context(CONTEXT_SECRET_NAME)
execution_role_arn = app.node.try_get_context(CONTEXT_EXECUTION_ROLE_ARN)
secret_arn = app.node.try_get_context(CONTEXT_SECRET_ARN)

# Environment configuration - uses CDK CLI's resolved account/region
env = cdk.Environment(
    account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
    region=os.environ.get("CDK_DEFAULT_REGION"),
)

# Required context: secret_name
if secret_name:
    logger.info("Synthesizing %s for secret %s", SECRETS_STACK_NAME, secret_name)
    SecretsStack(
        app,
        SECRETS_STACK_NAME,
        secret_name=secret_name,
        description=app.node.try_get_context(CONTEXT_SECRET_DESCRIPTION),
        kms_key_arn=app.node.try_get_context(CONTEXT_KMS_KEY_ARN),
        username=app.node.try_get_context(CONTEXT_USERNAME) or DEFAULT_USERNAME,
        db_instance_identifier=app.node.try_get_context(CONTEXT_DB_INSTANCE_IDENTIFIER),
        db_cluster_identifier=app.node.try_get_context(CONTEXT_DB_CLUSTER_IDENTIFIER),
        rotation_lambda_arn=app.node.try_get_context(CONTEXT_ROTATION_LAMBDA_ARN),
        env=env,
    )

# Required context: execution_role_arn, secret_arn
if execution_role_arn and secret_arn:
    logger.info("Synthesizing %s for role %s", IAM_POLICY_STACK_NAME, execution_role_arn)
    IamPolicyStack(
        app,
        IAM_POLICY_STACK_NAME,
        execution_role_arn=execution_role_arn,
        secret_arn=secret_arn,
        version_stages=parse_version_stages(
            app.node.try_get_context(CONTEXT_VERSION_STAGES)
        ),
        env=env,
    )

app.synth()
