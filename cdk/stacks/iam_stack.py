"""
CDK stack giving an existing role read access to an existing secret.

Neither the role nor the secret is created here: both are referenced by ARN
and the stack only adds the role's policy. Read access covers the exact
secret ARN and can be narrowed to a set of version stages.

Usage:
    cdk deploy IamPolicyStack \\
        --context execution_role_arn="arn:aws:iam::123456789012:role/..." \\
        --context secret_arn="arn:aws:secretsmanager:region:account:secret:name" \\
        --context version_stages="AWSCURRENT"
"""

import re

from aws_cdk import CfnOutput, Stack
from aws_cdk import aws_iam as iam
from constructs import Construct

from secret_constructs import Secret

# Role ARNs, including role paths
IAM_ROLE_ARN_PATTERN = re.compile(r"^arn:aws:iam::\d{12}:role/[\w+=,.@/-]+$")

SECRETS_MANAGER_ARN_PATTERN = re.compile(
    r"^arn:aws:secretsmanager:[a-z0-9-]+:\d{12}:secret:[\w/+=,.@-]+"
)


def require_arn(name: str, value: str, pattern: re.Pattern, kind: str) -> None:
    """Raise ValueError unless ``value`` is a non-empty ARN matching ``pattern``."""
    if not value:
        raise ValueError(f"{name} cannot be empty")
    if not pattern.match(value):
        raise ValueError(f"Invalid {kind} ARN format: {value}")


class IamPolicyStack(Stack):
    """
    Read access to one secret for one imported role.

    Attributes:
        grant: The grant of secretsmanager:GetSecretValue to the role.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        execution_role_arn: str,
        secret_arn: str,
        *,
        version_stages: list[str] | None = None,
        **kwargs,
    ) -> None:
        """
        Args:
            scope: CDK app or stage scope.
            construct_id: Unique identifier for this stack.
            execution_role_arn: Role receiving read access.
            secret_arn: Secret to read.
            version_stages: If given, only these version stages can be read.
            **kwargs: Additional stack properties (env, etc.).

        Raises:
            ValueError: If an ARN is empty or malformed.
        """
        super().__init__(scope, construct_id, **kwargs)

        require_arn("execution_role_arn", execution_role_arn, IAM_ROLE_ARN_PATTERN, "IAM role")
        require_arn("secret_arn", secret_arn, SECRETS_MANAGER_ARN_PATTERN, "Secrets Manager")

        # mutable so the grant can add a policy to the role
        role = iam.Role.from_role_arn(
            self, "ExecutionRole", role_arn=execution_role_arn, mutable=True
        )
        secret = Secret.from_secret_arn(self, "Secret", secret_arn)
        self.grant = secret.grant_read(role, version_stages)

        CfnOutput(
            self,
            "GrantedSecretArn",
            value=secret.secret_arn,
            description="ARN of the secret the role can read",
        )
