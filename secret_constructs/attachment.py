"""
Secret target attachments.

Attaching a secret to an RDS instance or cluster lets Secrets Manager fill
in the connection details of the database. The attachment exposes a new
secret ARN that depends on the attachment, so consumers that reference it
(rotation schedules in particular) are deployed after the attachment.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from aws_cdk import aws_rds as rds
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from .secret import ISecret, SecretBase

logger = logging.getLogger(__name__)


class AttachmentTargetType(str, Enum):
    """The type of database associated with the secret."""

    INSTANCE = "AWS::RDS::DBInstance"
    CLUSTER = "AWS::RDS::DBCluster"


@dataclass(frozen=True)
class SecretAttachmentTargetProps:
    """
    Attachment target specification.

    Attributes:
        target_id: The id of the database to attach the secret to.
        target_type: The type of the database.
    """

    target_id: str
    target_type: AttachmentTargetType

    def as_secret_attachment_target(self) -> "SecretAttachmentTargetProps":
        return self


@runtime_checkable
class ISecretAttachmentTarget(Protocol):
    """Anything a secret can be attached to."""

    def as_secret_attachment_target(self) -> SecretAttachmentTargetProps:
        """Render the target specification."""
        ...


class DatabaseInstanceTarget:
    """Attachment target for an RDS database instance."""

    def __init__(self, instance: rds.IDatabaseInstance) -> None:
        self.instance = instance

    def as_secret_attachment_target(self) -> SecretAttachmentTargetProps:
        return SecretAttachmentTargetProps(
            target_id=self.instance.instance_identifier,
            target_type=AttachmentTargetType.INSTANCE,
        )


class DatabaseClusterTarget:
    """Attachment target for an RDS database cluster."""

    def __init__(self, cluster: rds.IDatabaseCluster) -> None:
        self.cluster = cluster

    def as_secret_attachment_target(self) -> SecretAttachmentTargetProps:
        return SecretAttachmentTargetProps(
            target_id=self.cluster.cluster_identifier,
            target_type=AttachmentTargetType.CLUSTER,
        )


class SecretTargetAttachment(SecretBase):
    """
    A secret attached to a database.

    The attachment's ``secret_arn`` supersedes the ARN of the source secret:
    reference the attachment, not the secret, once the secret is attached.

    Attributes:
        resource: The underlying ``CfnSecretTargetAttachment``.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        secret: ISecret,
        target: ISecretAttachmentTarget,
    ) -> None:
        """
        Initialize the SecretTargetAttachment.

        Args:
            scope: Parent construct.
            construct_id: Unique identifier within the scope.
            secret: The secret to attach.
            target: The database to attach the secret to.
        """
        super().__init__(scope, construct_id)

        target_props = target.as_secret_attachment_target()
        self.resource = secretsmanager.CfnSecretTargetAttachment(
            self,
            "Resource",
            secret_id=secret.secret_arn,
            target_id=target_props.target_id,
            target_type=target_props.target_type.value,
        )

        self._encryption_key = secret.encryption_key
        # Referencing the attachment keeps consumers ordered after it
        self._secret_arn = self.resource.ref

        logger.debug(
            "Declared secret attachment %s to %s",
            self.node.path,
            target_props.target_type.value,
        )

    @property
    def secret_target_attachment_secret_arn(self) -> str:
        """Same as ``secret_arn``."""
        return self.secret_arn

    @staticmethod
    def from_secret_target_attachment_secret_arn(
        scope: Construct, construct_id: str, secret_target_attachment_secret_arn: str
    ) -> "ImportedSecretTargetAttachment":
        """Reference an existing attached secret by ARN."""
        return ImportedSecretTargetAttachment(
            scope,
            construct_id,
            secret_target_attachment_secret_arn=secret_target_attachment_secret_arn,
        )


class ImportedSecretTargetAttachment(SecretBase):
    """An attached secret defined outside the stack, referenced by ARN."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        secret_target_attachment_secret_arn: str,
    ) -> None:
        super().__init__(scope, construct_id)
        self._secret_arn = secret_target_attachment_secret_arn

    @property
    def secret_target_attachment_secret_arn(self) -> str:
        return self.secret_arn
