"""CDK stacks for Secrets Manager database credentials."""

from .constants import (
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
)
from .iam_stack import IamPolicyStack
from .secrets_stack import SecretsStack

__all__ = [
    # Stacks
    "SecretsStack",
    "IamPolicyStack",
    # Constants
    "SECRETS_STACK_NAME",
    "IAM_POLICY_STACK_NAME",
    "DEFAULT_USERNAME",
    "CONTEXT_SECRET_NAME",
    "CONTEXT_SECRET_DESCRIPTION",
    "CONTEXT_KMS_KEY_ARN",
    "CONTEXT_USERNAME",
    "CONTEXT_DB_INSTANCE_IDENTIFIER",
    "CONTEXT_DB_CLUSTER_IDENTIFIER",
    "CONTEXT_ROTATION_LAMBDA_ARN",
    "CONTEXT_EXECUTION_ROLE_ARN",
    "CONTEXT_SECRET_ARN",
    "CONTEXT_VERSION_STAGES",
]
