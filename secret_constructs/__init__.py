"""CDK constructs for AWS Secrets Manager secrets, attachments and rotation."""

from .attachment import (
    AttachmentTargetType,
    DatabaseClusterTarget,
    DatabaseInstanceTarget,
    ImportedSecretTargetAttachment,
    ISecretAttachmentTarget,
    SecretAttachmentTargetProps,
    SecretTargetAttachment,
)
from .errors import ConfigurationError
from .generator import SecretStringGenerator
from .rotation_schedule import RotationSchedule
from .secret import ImportedSecret, ISecret, Secret, SecretAttributes, SecretBase

__all__ = [
    # Secrets
    "ISecret",
    "SecretBase",
    "Secret",
    "ImportedSecret",
    "SecretAttributes",
    "SecretStringGenerator",
    # Attachments
    "AttachmentTargetType",
    "ISecretAttachmentTarget",
    "SecretAttachmentTargetProps",
    "DatabaseInstanceTarget",
    "DatabaseClusterTarget",
    "SecretTargetAttachment",
    "ImportedSecretTargetAttachment",
    # Rotation
    "RotationSchedule",
    # Errors
    "ConfigurationError",
]
