"""
Configuration module for environment variable validation and type-safe config.

Every setting has a default matching the fixed request parameters the demos
were written against, so the scripts run with no environment at all. The
S3 defaults point at a local s3rver mock.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional


TRUTHY_VALUES = {"1", "true", "yes", "on"}


def _split_addresses(value: str) -> List[str]:
    return [address.strip() for address in value.split(",") if address.strip()]


@dataclass
class Config:
    """Type-safe configuration object with validated environment variables."""

    aws_region: str = "us-east-1"
    log_level: str = "INFO"

    batch_job_name: str = "test-job"
    batch_job_queue: str = "test-queue"
    batch_job_definition: str = "test-job-definition"

    cognito_user_pool_name: str = "test-user-pool"
    cognito_test_username: str = "test-user"

    s3_bucket: str = "test-bucket"
    s3_endpoint_url: Optional[str] = "http://localhost:4568"
    s3_access_key_id: Optional[str] = "S3RVER"
    s3_secret_access_key: Optional[str] = "S3RVER"
    s3_force_path_style: bool = True
    s3_presign_expires: int = 3600

    ses_from_address: str = "from@gmail.com"
    ses_to_addresses: List[str] = field(default_factory=lambda: ["to@gmail.com"])

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create Config instance from environment variables.

        Raises:
            ValueError: If an environment variable holds an invalid value.
        """
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        # Validate log level
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_log_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_log_levels}, got: {log_level}"
            )

        presign_expires_raw = os.environ.get("S3_PRESIGN_EXPIRES", "3600")
        try:
            s3_presign_expires = int(presign_expires_raw)
        except ValueError:
            s3_presign_expires = 0
        if s3_presign_expires <= 0:
            raise ValueError(
                f"S3_PRESIGN_EXPIRES must be a positive integer, got: {presign_expires_raw}"
            )

        # Empty string selects the real AWS endpoint / default credential chain
        s3_endpoint_url = os.environ.get("S3_ENDPOINT_URL", "http://localhost:4568") or None
        s3_access_key_id = os.environ.get("S3_ACCESS_KEY_ID", "S3RVER") or None
        s3_secret_access_key = os.environ.get("S3_SECRET_ACCESS_KEY", "S3RVER") or None
        s3_force_path_style = (
            os.environ.get("S3_FORCE_PATH_STYLE", "true").strip().lower() in TRUTHY_VALUES
        )

        ses_to_addresses = _split_addresses(os.environ.get("SES_TO_ADDRESSES", "to@gmail.com"))
        if not ses_to_addresses:
            raise ValueError("SES_TO_ADDRESSES must name at least one address")

        return cls(
            aws_region=os.environ.get("AWS_REGION", "us-east-1"),
            log_level=log_level,
            batch_job_name=os.environ.get("BATCH_JOB_NAME", "test-job"),
            batch_job_queue=os.environ.get("BATCH_JOB_QUEUE", "test-queue"),
            batch_job_definition=os.environ.get("BATCH_JOB_DEFINITION", "test-job-definition"),
            cognito_user_pool_name=os.environ.get("COGNITO_USER_POOL_NAME", "test-user-pool"),
            cognito_test_username=os.environ.get("COGNITO_TEST_USERNAME", "test-user"),
            s3_bucket=os.environ.get("S3_BUCKET", "test-bucket"),
            s3_endpoint_url=s3_endpoint_url,
            s3_access_key_id=s3_access_key_id,
            s3_secret_access_key=s3_secret_access_key,
            s3_force_path_style=s3_force_path_style,
            s3_presign_expires=s3_presign_expires,
            ses_from_address=os.environ.get("SES_FROM_ADDRESS", "from@gmail.com"),
            ses_to_addresses=ses_to_addresses,
        )


# Global config instance, built on first use
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config: The validated configuration object

    Raises:
        ValueError: If environment variables are invalid.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
