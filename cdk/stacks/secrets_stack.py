"""
CDK stack for database credentials in Secrets Manager.

This stack creates a secret holding generated database credentials. The
secret can optionally be encrypted with a customer-managed KMS key, attached
to an existing RDS instance or cluster, and rotated by an existing rotation
Lambda.

Usage:
    cdk deploy SecretsStack \\
        --context secret_name="app/database-credentials" \\
        --context db_instance_identifier="app-database" \\
        --context rotation_lambda_arn="arn:aws:lambda:..."
"""

import json
import re

from aws_cdk import CfnOutput, Stack
from aws_cdk import aws_kms as kms
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

from secret_constructs import (
    AttachmentTargetType,
    Secret,
    SecretAttachmentTargetProps,
    SecretBase,
    SecretStringGenerator,
)

from .constants import (
    DATABASE_ATTACHMENT_ID,
    DATABASE_SECRET_ID,
    DEFAULT_EXCLUDE_CHARACTERS,
    DEFAULT_SECRET_DESCRIPTION,
    DEFAULT_USERNAME,
    PASSWORD_KEY,
    ROTATION_SCHEDULE_ID,
)

# Regex pattern for validating KMS key ARNs
KMS_KEY_ARN_PATTERN = re.compile(r"^arn:aws:kms:[a-z0-9-]+:\d{12}:key/[\w-]+$")

# Regex pattern for validating Lambda function ARNs
LAMBDA_ARN_PATTERN = re.compile(
    r"^arn:aws:lambda:[a-z0-9-]+:\d{12}:function:[\w-]+(:[\w$-]+)?$"
)


class SecretsStack(Stack):
    """
    Stack managing generated database credentials in Secrets Manager.

    The password is generated by Secrets Manager and merged into a JSON
    document holding the username. When the secret is attached to a
    database, the attachment ARN is exported and used by the rotation
    schedule in place of the secret ARN.

    Attributes:
        secret: The Secrets Manager secret.
        attached_secret: The secret as downstream consumers must reference
            it: the attachment if the secret is attached, else the secret.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        secret_name: str,
        *,
        description: str | None = None,
        kms_key_arn: str | None = None,
        username: str = DEFAULT_USERNAME,
        db_instance_identifier: str | None = None,
        db_cluster_identifier: str | None = None,
        rotation_lambda_arn: str | None = None,
        **kwargs,
    ) -> None:
        """
        Initialize the SecretsStack.

        Args:
            scope: CDK app or stage scope.
            construct_id: Unique identifier for this stack.
            secret_name: Name for the secret in Secrets Manager.
            description: Description of the secret.
            kms_key_arn: ARN of an existing KMS key to encrypt the secret.
            username: Database username stored alongside the password.
            db_instance_identifier: RDS instance to attach the secret to.
            db_cluster_identifier: RDS cluster to attach the secret to.
            rotation_lambda_arn: ARN of an existing rotation Lambda.
            **kwargs: Additional stack properties (env, etc.).

        Raises:
            ValueError: If inputs are empty, malformed or conflicting.
        """
        super().__init__(scope, construct_id, **kwargs)

        # Validate inputs
        if not secret_name or not secret_name.strip():
            raise ValueError("secret_name cannot be empty")
        if not username or not username.strip():
            raise ValueError("username cannot be empty")
        if db_instance_identifier and db_cluster_identifier:
            raise ValueError(
                "db_instance_identifier and db_cluster_identifier are mutually exclusive"
            )
        if kms_key_arn and not KMS_KEY_ARN_PATTERN.match(kms_key_arn):
            raise ValueError(f"Invalid KMS key ARN format: {kms_key_arn}")
        if rotation_lambda_arn and not LAMBDA_ARN_PATTERN.match(rotation_lambda_arn):
            raise ValueError(f"Invalid Lambda function ARN format: {rotation_lambda_arn}")

        encryption_key = None
        if kms_key_arn:
            encryption_key = kms.Key.from_key_arn(self, "EncryptionKey", kms_key_arn)

        self.secret = Secret(
            self,
            DATABASE_SECRET_ID,
            name=secret_name,
            description=description or DEFAULT_SECRET_DESCRIPTION,
            encryption_key=encryption_key,
            generate_secret_string=SecretStringGenerator(
                secret_string_template=json.dumps({"username": username}),
                generate_string_key=PASSWORD_KEY,
                exclude_characters=DEFAULT_EXCLUDE_CHARACTERS,
            ),
        )

        # Once attached, consumers must use the attachment ARN
        self.attached_secret: SecretBase = self.secret
        target = None
        if db_instance_identifier:
            target = SecretAttachmentTargetProps(
                target_id=db_instance_identifier,
                target_type=AttachmentTargetType.INSTANCE,
            )
        elif db_cluster_identifier:
            target = SecretAttachmentTargetProps(
                target_id=db_cluster_identifier,
                target_type=AttachmentTargetType.CLUSTER,
            )
        if target is not None:
            self.attached_secret = self.secret.add_target_attachment(
                DATABASE_ATTACHMENT_ID, target=target
            )

        if rotation_lambda_arn:
            rotation_lambda = lambda_.Function.from_function_arn(
                self, "RotationLambda", rotation_lambda_arn
            )
            self.attached_secret.add_rotation_schedule(
                ROTATION_SCHEDULE_ID, rotation_lambda=rotation_lambda
            )

        # Export ARN for use by IamPolicyStack
        CfnOutput(
            self,
            "SecretArn",
            value=self.attached_secret.secret_arn,
            description="ARN of the database credentials secret",
            export_name=f"{construct_id}-SecretArn",
        )

        CfnOutput(
            self,
            "SecretName",
            value=secret_name,
            description="Name of the database credentials secret",
            export_name=f"{construct_id}-SecretName",
        )
