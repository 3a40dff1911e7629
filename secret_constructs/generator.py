"""
Password generation rules for new secrets.

The ruleset maps onto the ``GenerateSecretString`` property of
``AWS::SecretsManager::Secret``. Every field is optional: a field left as
``None`` is omitted from the template and Secrets Manager applies its own
default (32 characters drawn from upper-case letters, lower-case letters,
digits and punctuation, with at least one character of each type).
"""

from dataclasses import dataclass

from aws_cdk import aws_secretsmanager as secretsmanager

from .errors import ConfigurationError


@dataclass(frozen=True)
class SecretStringGenerator:
    """
    Configuration to generate secrets such as passwords automatically.

    Attributes:
        exclude_uppercase: Leave upper-case letters out. Default false.
        require_each_included_type: Include at least one character of every
            allowed type. Default true.
        include_space: Allow the space character. Default false.
        exclude_characters: Characters that must not appear in the generated
            value, 0 to 4096 characters long. Default no exclusions.
        password_length: Length of the generated value. Default 32.
        exclude_punctuation: Leave punctuation out. Default false.
        exclude_lowercase: Leave lower-case letters out. Default false.
        exclude_numbers: Leave digits out. Default false.
        secret_string_template: A JSON document the generated value is merged
            into under ``generate_string_key``. Requires
            ``generate_string_key``.
        generate_string_key: The JSON key the generated value is stored under
            in ``secret_string_template``. Requires
            ``secret_string_template``.
    """

    exclude_uppercase: bool | None = None
    require_each_included_type: bool | None = None
    include_space: bool | None = None
    exclude_characters: str | None = None
    password_length: int | None = None
    exclude_punctuation: bool | None = None
    exclude_lowercase: bool | None = None
    exclude_numbers: bool | None = None
    secret_string_template: str | None = None
    generate_string_key: str | None = None

    def validate(self) -> None:
        """
        Check that the template and its key are set together.

        Raises:
            ConfigurationError: If only one of ``secret_string_template`` and
                ``generate_string_key`` is set.
        """
        if bool(self.secret_string_template) != bool(self.generate_string_key):
            raise ConfigurationError(
                "secret_string_template and generate_string_key must be specified together"
            )

    def to_cfn_property(self) -> secretsmanager.CfnSecret.GenerateSecretStringProperty:
        """Render the ruleset as the L1 ``GenerateSecretString`` property."""
        return secretsmanager.CfnSecret.GenerateSecretStringProperty(
            exclude_characters=self.exclude_characters,
            exclude_lowercase=self.exclude_lowercase,
            exclude_numbers=self.exclude_numbers,
            exclude_punctuation=self.exclude_punctuation,
            exclude_uppercase=self.exclude_uppercase,
            generate_string_key=self.generate_string_key,
            include_space=self.include_space,
            password_length=self.password_length,
            require_each_included_type=self.require_each_included_type,
            secret_string_template=self.secret_string_template,
        )
