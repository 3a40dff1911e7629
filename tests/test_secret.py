"""CDK assertion tests for the Secret construct and read grants."""

import pytest
from aws_cdk import Stack
from aws_cdk import aws_iam as iam
from aws_cdk import aws_kms as kms
from aws_cdk.assertions import Template

from secret_constructs import (
    ConfigurationError,
    ImportedSecret,
    ISecret,
    Secret,
    SecretAttributes,
    SecretStringGenerator,
)

IMPORTED_SECRET_ARN = (
    "arn:aws:secretsmanager:us-east-1:123456789012:secret:imported-secret-abc123"
)


def only_resource(template: Template, resource_type: str) -> dict:
    """Return the single resource of a type from a template."""
    resources = template.find_resources(resource_type)
    assert len(resources) == 1
    return next(iter(resources.values()))


def policy_statements(template: Template) -> list[dict]:
    """Return the statements of the single IAM policy in a template."""
    policy = only_resource(template, "AWS::IAM::Policy")
    return policy["Properties"]["PolicyDocument"]["Statement"]


def decrypt_statements(template: Template) -> list[dict]:
    """Return the kms:Decrypt statements of the single key policy in a template."""
    key = only_resource(template, "AWS::KMS::Key")
    return [
        statement
        for statement in key["Properties"]["KeyPolicy"]["Statement"]
        if statement["Action"] == "kms:Decrypt"
    ]


class TestSecret:
    """Tests for the Secret construct."""

    def test_default_secret(self, stack):
        """Test that a bare secret leaves generation to Secrets Manager defaults."""
        Secret(stack, "Secret")

        template = Template.from_stack(stack)
        template.resource_count_is("AWS::SecretsManager::Secret", 1)
        secret = only_resource(template, "AWS::SecretsManager::Secret")
        assert secret["Properties"] == {"GenerateSecretString": {}}

    def test_secret_properties(self, stack):
        """Test that description, name and key are rendered."""
        key = kms.Key(stack, "Key")
        Secret(
            stack,
            "Secret",
            description="Database credentials",
            name="app/database",
            encryption_key=key,
        )

        template = Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::SecretsManager::Secret",
            {
                "Description": "Database credentials",
                "Name": "app/database",
                "KmsKeyId": stack.resolve(key.key_arn),
            },
        )

    def test_generation_rules_rendered(self, stack):
        """Test that every generation rule reaches the template."""
        Secret(
            stack,
            "Secret",
            generate_secret_string=SecretStringGenerator(
                exclude_uppercase=True,
                exclude_lowercase=False,
                exclude_numbers=True,
                exclude_punctuation=True,
                include_space=True,
                password_length=64,
                exclude_characters="@/",
                require_each_included_type=False,
                secret_string_template='{"username": "admin"}',
                generate_string_key="password",
            ),
        )

        template = Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::SecretsManager::Secret",
            {
                "GenerateSecretString": {
                    "ExcludeUppercase": True,
                    "ExcludeLowercase": False,
                    "ExcludeNumbers": True,
                    "ExcludePunctuation": True,
                    "IncludeSpace": True,
                    "PasswordLength": 64,
                    "ExcludeCharacters": "@/",
                    "RequireEachIncludedType": False,
                    "SecretStringTemplate": '{"username": "admin"}',
                    "GenerateStringKey": "password",
                }
            },
        )

    @pytest.mark.parametrize(
        "template_value, key_value",
        [
            ('{"username": "admin"}', None),
            (None, "password"),
        ],
    )
    def test_template_without_key_raises_error(self, stack, template_value, key_value):
        """Test that setting only one of template and key raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="must be specified together"):
            Secret(
                stack,
                "Secret",
                generate_secret_string=SecretStringGenerator(
                    secret_string_template=template_value,
                    generate_string_key=key_value,
                ),
            )

    @pytest.mark.parametrize(
        "template_value, key_value",
        [
            ('{"username": "admin"}', "password"),
            (None, None),
        ],
    )
    def test_template_and_key_together_accepted(self, stack, template_value, key_value):
        """Test that template and key set together or not at all are accepted."""
        Secret(
            stack,
            "Secret",
            generate_secret_string=SecretStringGenerator(
                secret_string_template=template_value,
                generate_string_key=key_value,
            ),
        )

        Template.from_stack(stack).resource_count_is("AWS::SecretsManager::Secret", 1)

    def test_configuration_error_is_value_error(self):
        """Test that ConfigurationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            SecretStringGenerator(generate_string_key="password").validate()

    def test_invalid_rules_add_nothing_to_tree(self, stack):
        """Test that a rejected secret leaves no construct behind."""
        with pytest.raises(ConfigurationError):
            Secret(
                stack,
                "Secret",
                generate_secret_string=SecretStringGenerator(generate_string_key="password"),
            )

        assert stack.node.try_find_child("Secret") is None
        Template.from_stack(stack).resource_count_is("AWS::SecretsManager::Secret", 0)

    def test_secret_arn_is_resource_ref(self, stack):
        """Test that the secret ARN references the CfnSecret."""
        secret = Secret(stack, "Secret")

        assert stack.resolve(secret.secret_arn) == {
            "Ref": stack.get_logical_id(secret.resource)
        }
        assert secret.encryption_key is None

    def test_secret_satisfies_protocol(self, stack):
        """Test that Secret is usable wherever an ISecret is expected."""
        assert isinstance(Secret(stack, "Secret"), ISecret)


class TestGrantRead:
    """Tests for SecretBase.grant_read."""

    def test_grant_without_key(self, stack, role):
        """Test a single GetSecretValue statement and no key grant."""
        secret = Secret(stack, "Secret")

        secret.grant_read(role)

        template = Template.from_stack(stack)
        statements = policy_statements(template)
        assert statements == [
            {
                "Action": "secretsmanager:GetSecretValue",
                "Effect": "Allow",
                "Resource": {"Ref": stack.get_logical_id(secret.resource)},
            }
        ]
        template.resource_count_is("AWS::KMS::Key", 0)

    def test_grant_with_current_version_stage(self, stack, role):
        """Test that version stages add a ForAnyValue condition."""
        secret = Secret(stack, "Secret")

        secret.grant_read(role, ["AWSCURRENT"])

        (statement,) = policy_statements(Template.from_stack(stack))
        assert statement["Condition"] == {
            "ForAnyValue:StringEquals": {"secretsmanager:VersionStage": ["AWSCURRENT"]}
        }

    def test_grant_with_several_version_stages(self, stack, role):
        """Test that any of several version stages is accepted."""
        secret = Secret(stack, "Secret")

        secret.grant_read(role, ["AWSCURRENT", "AWSPREVIOUS"])

        (statement,) = policy_statements(Template.from_stack(stack))
        assert statement["Condition"] == {
            "ForAnyValue:StringEquals": {
                "secretsmanager:VersionStage": ["AWSCURRENT", "AWSPREVIOUS"]
            }
        }

    def test_grant_without_version_stages_has_no_condition(self, stack, role):
        """Test that omitting version stages omits the condition."""
        secret = Secret(stack, "Secret")

        secret.grant_read(role)

        (statement,) = policy_statements(Template.from_stack(stack))
        assert "Condition" not in statement

    def test_grant_with_key_grants_decrypt_via_secrets_manager(self, stack, role):
        """Test one decrypt grant on the key, scoped to Secrets Manager."""
        key = kms.Key(stack, "Key")
        secret = Secret(stack, "Secret", encryption_key=key)

        secret.grant_read(role)

        template = Template.from_stack(stack)
        assert len(policy_statements(template)) == 1
        (statement,) = decrypt_statements(template)
        assert statement["Effect"] == "Allow"
        assert statement["Principal"] == {"AWS": stack.resolve(role.role_arn)}
        assert statement["Condition"] == {
            "StringEquals": {"kms:ViaService": "secretsmanager.us-east-1.amazonaws.com"}
        }

    def test_grant_returns_principal_grant(self, stack, role):
        """Test that the grant is returned for further refinement."""
        secret = Secret(stack, "Secret")

        grant = secret.grant_read(role)

        assert isinstance(grant, iam.Grant)
        assert grant.success
        assert grant.principal_statement is not None


class TestSecretValue:
    """Tests for secret value dynamic references."""

    def test_secret_value(self, stack):
        """Test the dynamic reference to the whole secret string."""
        secret = Secret.from_secret_arn(stack, "Secret", IMPORTED_SECRET_ARN)

        assert stack.resolve(secret.secret_value) == (
            f"{{{{resolve:secretsmanager:{IMPORTED_SECRET_ARN}:SecretString:::}}}}"
        )

    def test_secret_json_value(self, stack):
        """Test the dynamic reference to one JSON field of the secret."""
        secret = Secret.from_secret_arn(stack, "Secret", IMPORTED_SECRET_ARN)

        assert stack.resolve(secret.secret_json_value("password")) == (
            f"{{{{resolve:secretsmanager:{IMPORTED_SECRET_ARN}:SecretString:password::}}}}"
        )


class TestImportedSecret:
    """Tests for referencing existing secrets."""

    def test_from_secret_arn(self, stack):
        """Test that importing by ARN keeps the ARN and emits no resource."""
        secret = Secret.from_secret_arn(stack, "Secret", IMPORTED_SECRET_ARN)

        assert isinstance(secret, ImportedSecret)
        assert secret.secret_arn == IMPORTED_SECRET_ARN
        assert secret.encryption_key is None
        Template.from_stack(stack).resource_count_is("AWS::SecretsManager::Secret", 0)

    def test_from_secret_attributes_keeps_key(self, stack):
        """Test that the imported secret exposes the given key."""
        key = kms.Key(stack, "Key")

        secret = Secret.from_secret_attributes(
            stack,
            "Secret",
            SecretAttributes(secret_arn=IMPORTED_SECRET_ARN, encryption_key=key),
        )

        assert secret.secret_arn == IMPORTED_SECRET_ARN
        assert secret.encryption_key is key

    def test_grant_on_imported_secret_uses_exact_arn(self, stack, role):
        """Test that read grants on an imported secret target its ARN."""
        secret = Secret.from_secret_arn(stack, "Secret", IMPORTED_SECRET_ARN)

        secret.grant_read(role)

        (statement,) = policy_statements(Template.from_stack(stack))
        assert statement["Resource"] == IMPORTED_SECRET_ARN

    def test_imported_secret_in_other_stack(self, stack):
        """Test that imports are scoped to the stack they are declared in."""
        other = Stack(stack.node.scope, "OtherStack")

        Secret.from_secret_arn(other, "Secret", IMPORTED_SECRET_ARN)

        assert other.node.try_find_child("Secret") is not None
        assert stack.node.try_find_child("Secret") is None
