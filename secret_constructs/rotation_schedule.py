"""
Rotation schedules for Secrets Manager secrets.

A rotation schedule wires a rotation Lambda to a secret and tells Secrets
Manager how often to invoke it.
"""

import logging
from typing import TYPE_CHECKING

from aws_cdk import Duration
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .secret import ISecret

logger = logging.getLogger(__name__)

DEFAULT_ROTATION_DAYS = 30

# Range accepted by RotationRules.AutomaticallyAfterDays
MIN_ROTATION_DAYS = 1
MAX_ROTATION_DAYS = 1000

SECONDS_PER_DAY = 24 * 60 * 60

SECRETS_MANAGER_SERVICE_PRINCIPAL = "secretsmanager.amazonaws.com"


def rotation_period_days(period: Duration) -> int:
    """
    Convert a rotation period to whole days.

    Raises:
        ConfigurationError: If the period is not a whole number of days
            between 1 and 1000.
    """
    seconds = period.to_seconds(integral=False)
    if seconds % SECONDS_PER_DAY:
        raise ConfigurationError(
            f"automatically_after must be a whole number of days, got {period.to_human_string()}"
        )
    rotation_days = int(seconds // SECONDS_PER_DAY)
    if not MIN_ROTATION_DAYS <= rotation_days <= MAX_ROTATION_DAYS:
        raise ConfigurationError(
            f"automatically_after must be between {MIN_ROTATION_DAYS} and "
            f"{MAX_ROTATION_DAYS} days, got {rotation_days}"
        )
    return rotation_days


class RotationSchedule(Construct):
    """
    A rotation schedule attached to a secret.

    Attributes:
        secret: The secret being rotated.
        rotation_days: Number of days between rotations.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        secret: "ISecret",
        rotation_lambda: lambda_.IFunction,
        automatically_after: Duration | None = None,
    ) -> None:
        """
        Initialize the RotationSchedule.

        Args:
            scope: Parent construct.
            construct_id: Unique identifier within the scope.
            secret: The secret to rotate. When the secret is attached to a
                database, pass the attachment so the schedule depends on it.
            rotation_lambda: The Lambda function that performs the rotation.
                It may be imported and live in an environment-agnostic stack.
            automatically_after: Time between rotations, in whole days.
                Defaults to 30 days.

        Raises:
            ConfigurationError: If the period is not a whole number of days
                between 1 and 1000.
        """
        rotation_days = rotation_period_days(
            automatically_after or Duration.days(DEFAULT_ROTATION_DAYS)
        )

        super().__init__(scope, construct_id)

        secretsmanager.CfnRotationSchedule(
            self,
            "Resource",
            secret_id=secret.secret_arn,
            rotation_lambda_arn=rotation_lambda.function_arn,
            rotation_rules=secretsmanager.CfnRotationSchedule.RotationRulesProperty(
                automatically_after_days=rotation_days,
            ),
        )

        # Declared directly: grant_invoke refuses imported functions whose
        # account cannot be compared with the stack's
        lambda_.CfnPermission(
            self,
            "InvokePermission",
            action="lambda:InvokeFunction",
            function_name=rotation_lambda.function_arn,
            principal=SECRETS_MANAGER_SERVICE_PRINCIPAL,
        )

        self.secret = secret
        self.rotation_days = rotation_days

        logger.debug(
            "Declared rotation schedule %s every %d days", self.node.path, rotation_days
        )
