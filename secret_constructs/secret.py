"""
Secrets Manager secret constructs.

``Secret`` declares a new ``AWS::SecretsManager::Secret``. Existing secrets
are referenced with ``Secret.from_secret_arn`` or
``Secret.from_secret_attributes``, which return an ``ImportedSecret`` and add
nothing to the template.

Every secret-like construct (new, imported or attached to a database)
shares the behaviour in ``SecretBase``: read grants, dynamic references to
the secret value and rotation schedules.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from aws_cdk import Duration, SecretValue, Stack
from aws_cdk import aws_iam as iam
from aws_cdk import aws_kms as kms
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from .generator import SecretStringGenerator
from .rotation_schedule import RotationSchedule

if TYPE_CHECKING:
    from .attachment import ISecretAttachmentTarget, SecretTargetAttachment

logger = logging.getLogger(__name__)

GET_SECRET_VALUE_ACTION = "secretsmanager:GetSecretValue"
VERSION_STAGE_CONDITION_KEY = "secretsmanager:VersionStage"


@runtime_checkable
class ISecret(Protocol):
    """A secret in AWS Secrets Manager."""

    @property
    def secret_arn(self) -> str:
        """The ARN of the secret."""
        ...

    @property
    def encryption_key(self) -> kms.IKey | None:
        """The customer-managed key encrypting the secret, if any."""
        ...

    @property
    def secret_value(self) -> SecretValue:
        ...

    def secret_json_value(self, json_field: str) -> SecretValue:
        ...

    def grant_read(
        self, grantee: iam.IGrantable, version_stages: list[str] | None = None
    ) -> iam.Grant:
        ...

    def add_rotation_schedule(
        self,
        construct_id: str,
        *,
        rotation_lambda: lambda_.IFunction,
        automatically_after: Duration | None = None,
    ) -> RotationSchedule:
        ...


@dataclass(frozen=True)
class SecretAttributes:
    """
    Attributes required to reference an existing secret.

    Attributes:
        secret_arn: The ARN of the secret in Secrets Manager.
        encryption_key: The key encrypting the secret, unless the account's
            default Secrets Manager key is used.
    """

    secret_arn: str
    encryption_key: kms.IKey | None = None


class SecretBase(Construct):
    """
    Common behaviour of secrets.

    Subclasses set ``_secret_arn`` and ``_encryption_key`` once during
    construction. Use ``Secret`` rather than this class directly.
    """

    _secret_arn: str
    _encryption_key: kms.IKey | None = None

    @property
    def secret_arn(self) -> str:
        return self._secret_arn

    @property
    def encryption_key(self) -> kms.IKey | None:
        return self._encryption_key

    def grant_read(
        self, grantee: iam.IGrantable, version_stages: list[str] | None = None
    ) -> iam.Grant:
        """
        Grant reading the secret value to a principal.

        When the secret is encrypted with a customer-managed key, decrypt
        permission on the key is granted too, but only for requests Secrets
        Manager makes on behalf of the grantee.

        Args:
            grantee: The principal being granted permission.
            version_stages: Version stages the grant is limited to. Any of the
                listed stages is accepted. When omitted, no restriction on
                version stages is applied.

        Returns:
            The grant for the ``GetSecretValue`` statement.
        """
        result = iam.Grant.add_to_principal(
            grantee=grantee,
            actions=[GET_SECRET_VALUE_ACTION],
            resource_arns=[self.secret_arn],
            scope=self,
        )
        if version_stages is not None and result.principal_statement:
            result.principal_statement.add_condition(
                "ForAnyValue:StringEquals",
                {VERSION_STAGE_CONDITION_KEY: version_stages},
            )

        if self.encryption_key is not None:
            # https://docs.aws.amazon.com/kms/latest/developerguide/services-secrets-manager.html
            self.encryption_key.grant_decrypt(
                kms.ViaServicePrincipal(
                    f"secretsmanager.{Stack.of(self).region}.amazonaws.com",
                    grantee.grant_principal,
                )
            )

        logger.debug(
            "Granted read on %s (version stages: %s)", self.node.path, version_stages
        )
        return result

    @property
    def secret_value(self) -> SecretValue:
        """The full secret string, as a dynamic reference."""
        return SecretValue.secrets_manager(self.secret_arn)

    def secret_json_value(self, json_field: str) -> SecretValue:
        """Interpret the secret as JSON and reference one field of it."""
        return SecretValue.secrets_manager(self.secret_arn, json_field=json_field)

    def add_rotation_schedule(
        self,
        construct_id: str,
        *,
        rotation_lambda: lambda_.IFunction,
        automatically_after: Duration | None = None,
    ) -> RotationSchedule:
        """Add a rotation schedule to the secret."""
        return RotationSchedule(
            self,
            construct_id,
            secret=self,
            rotation_lambda=rotation_lambda,
            automatically_after=automatically_after,
        )


class Secret(SecretBase):
    """
    A new secret in AWS Secrets Manager.

    Attributes:
        resource: The underlying ``CfnSecret``.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        description: str | None = None,
        encryption_key: kms.IKey | None = None,
        generate_secret_string: SecretStringGenerator | None = None,
        name: str | None = None,
    ) -> None:
        """
        Initialize the Secret.

        Args:
            scope: Parent construct.
            construct_id: Unique identifier within the scope.
            description: Human-friendly description of the secret.
            encryption_key: Customer-managed key used to encrypt the secret
                value. Defaults to the account's Secrets Manager key.
            generate_secret_string: How to generate the secret value. Defaults
                to the Secrets Manager generation defaults.
            name: Name of the secret. Deleted secret names stay reserved for a
                7 to 30 day recovery window. Defaults to a CloudFormation
                generated name.

        Raises:
            ConfigurationError: If the generation ruleset sets only one of
                its template and key.
        """
        generator = generate_secret_string or SecretStringGenerator()
        generator.validate()

        super().__init__(scope, construct_id)

        self.resource = secretsmanager.CfnSecret(
            self,
            "Resource",
            description=description,
            kms_key_id=encryption_key.key_arn if encryption_key is not None else None,
            generate_secret_string=generator.to_cfn_property(),
            name=name,
        )

        self._encryption_key = encryption_key
        self._secret_arn = self.resource.ref

        logger.debug("Declared secret %s", self.node.path)

    @staticmethod
    def from_secret_arn(
        scope: Construct, construct_id: str, secret_arn: str
    ) -> "ImportedSecret":
        """Reference an existing secret by ARN."""
        return Secret.from_secret_attributes(
            scope, construct_id, SecretAttributes(secret_arn=secret_arn)
        )

    @staticmethod
    def from_secret_attributes(
        scope: Construct, construct_id: str, attrs: SecretAttributes
    ) -> "ImportedSecret":
        """
        Reference an existing secret.

        Args:
            scope: The scope of the import.
            construct_id: The id of the imported secret in the construct tree.
            attrs: The attributes of the imported secret.
        """
        return ImportedSecret(
            scope,
            construct_id,
            secret_arn=attrs.secret_arn,
            encryption_key=attrs.encryption_key,
        )

    def add_target_attachment(
        self, construct_id: str, *, target: "ISecretAttachmentTarget"
    ) -> "SecretTargetAttachment":
        """
        Attach the secret to a database.

        Returns:
            The attachment, whose ARN must be used instead of this secret's
            from now on.
        """
        from .attachment import SecretTargetAttachment

        return SecretTargetAttachment(self, construct_id, secret=self, target=target)


class ImportedSecret(SecretBase):
    """A secret defined outside the stack, referenced by ARN."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        secret_arn: str,
        encryption_key: kms.IKey | None = None,
    ) -> None:
        super().__init__(scope, construct_id)
        self._secret_arn = secret_arn
        self._encryption_key = encryption_key
