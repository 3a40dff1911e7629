"""Constants used across CDK stacks."""

# Stack names
SECRETS_STACK_NAME = "SecretsStack"
IAM_POLICY_STACK_NAME = "IamPolicyStack"

# Resource identifiers
DATABASE_SECRET_ID = "DatabaseSecret"
DATABASE_ATTACHMENT_ID = "DatabaseAttachment"
ROTATION_SCHEDULE_ID = "RotationSchedule"

# Default values
DEFAULT_USERNAME = "admin"
DEFAULT_SECRET_DESCRIPTION = "Database credentials"
# Characters that break RDS master passwords and connection strings
DEFAULT_EXCLUDE_CHARACTERS = "\"@/\\ '"
PASSWORD_KEY = "password"

# CDK context keys - passed via --context flags
CONTEXT_SECRET_NAME = "secret_name"
CONTEXT_SECRET_DESCRIPTION = "secret_description"
CONTEXT_KMS_KEY_ARN = "kms_key_arn"
CONTEXT_USERNAME = "username"
CONTEXT_DB_INSTANCE_IDENTIFIER = "db_instance_identifier"
CONTEXT_DB_CLUSTER_IDENTIFIER = "db_cluster_identifier"
CONTEXT_ROTATION_LAMBDA_ARN = "rotation_lambda_arn"
CONTEXT_EXECUTION_ROLE_ARN = "execution_role_arn"
CONTEXT_SECRET_ARN = "secret_arn"
CONTEXT_VERSION_STAGES = "version_stages"
