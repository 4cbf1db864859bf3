"""
Application Configuration Management

Loads configuration from environment variables and AWS Secrets Manager.
Supports a local listener (server) mode and a per-request (serverless) mode.
Auto-detects AWS Lambda runtime environment.
"""

import json
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

import boto3
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EXECUTION_MODE_SERVER = "server"
EXECUTION_MODE_SERVERLESS = "serverless"


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="development", description="Environment name")
    execution_mode: str = Field(
        default=EXECUTION_MODE_SERVER,
        description="'server' binds a local listener, 'serverless' is invoked per request",
    )

    # Application
    app_name: str = Field(default="SecuraScan Backend")
    app_version: str = Field(default="1.0.0")
    log_level: str = Field(default="INFO")

    # Local listener
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    # Razorpay
    razorpay_webhook_secret: Optional[str] = Field(
        default=None, description="Razorpay webhook signing secret"
    )

    # Firebase / Firestore
    firebase_service_account_key: Optional[str] = Field(
        default=None, description="Firebase service account credentials (JSON)"
    )
    app_id: str = Field(
        default="securascan-prod", description="Namespace under the artifacts collection"
    )

    # CORS
    cors_origins: List[str] = Field(default=["*"])
    cors_allow_credentials: bool = Field(default=False)
    cors_allow_methods: List[str] = Field(default=["GET", "POST"])
    cors_allow_headers: List[str] = Field(default=["*"])

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment"""
        valid_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}")
        return v_lower

    @field_validator("execution_mode")
    @classmethod
    def validate_execution_mode(cls, v: str) -> str:
        """Validate execution mode"""
        valid_modes = [EXECUTION_MODE_SERVER, EXECUTION_MODE_SERVERLESS]
        v_lower = v.lower()
        if v_lower not in valid_modes:
            raise ValueError(f"Execution mode must be one of {valid_modes}")
        return v_lower

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate listener port"""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment == "development"

    @property
    def is_lambda(self) -> bool:
        """Check if running in AWS Lambda environment"""
        return bool(os.getenv("AWS_LAMBDA_FUNCTION_NAME"))

    @property
    def is_serverless(self) -> bool:
        """Check if the hosting runtime invokes the app per request"""
        return self.is_lambda or self.execution_mode == EXECUTION_MODE_SERVERLESS

    def validate_required_secrets(self) -> List[str]:
        """
        Report required secrets that are missing.

        Missing secrets are not fatal at startup: the webhook endpoint
        fails closed for every request until they are configured.

        Returns:
            Names of the missing settings (empty when fully configured)
        """
        missing = []

        if not self.razorpay_webhook_secret:
            missing.append("razorpay_webhook_secret")
        if not self.firebase_service_account_key:
            missing.append("firebase_service_account_key")

        return missing


def _fetch_secret_by_arn(arn: str, region: str) -> str:
    """
    Fetch a secret value from AWS Secrets Manager using ARN.

    Args:
        arn: The ARN of the secret
        region: AWS region

    Returns:
        The secret value as a string
    """
    try:
        client = boto3.client("secretsmanager", region_name=region)
        response = client.get_secret_value(SecretId=arn)
        return response.get("SecretString", "")
    except Exception as e:
        raise RuntimeError(f"Failed to retrieve secret from ARN {arn}: {e}")


# Environment variable -> ARN variable resolved in Lambda
SECRET_ARN_VARIABLES: Dict[str, str] = {
    "RAZORPAY_WEBHOOK_SECRET": "RAZORPAY_WEBHOOK_SECRET_ARN",
    "FIREBASE_SERVICE_ACCOUNT_KEY": "FIREBASE_SERVICE_ACCOUNT_KEY_ARN",
}


def load_lambda_secrets(environ: Optional[Dict[str, Any]] = None) -> List[str]:
    """
    Resolve *_ARN variables into their plain counterparts.

    Values already present in the environment win over Secrets Manager.

    Args:
        environ: Mapping to read and update (defaults to os.environ)

    Returns:
        Names of the variables that were injected
    """
    environ = os.environ if environ is None else environ
    region = environ.get("AWS_REGION", "us-east-1")
    injected = []

    for variable, arn_variable in SECRET_ARN_VARIABLES.items():
        arn = environ.get(arn_variable)
        if not arn or environ.get(variable):
            continue
        environ[variable] = _fetch_secret_by_arn(arn, region)
        injected.append(variable)

    return injected


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    In Lambda environment, automatically fetches secrets from Secrets Manager
    using ARN environment variables (RAZORPAY_WEBHOOK_SECRET_ARN, etc.)
    """
    if os.getenv("AWS_LAMBDA_FUNCTION_NAME"):
        try:
            load_lambda_secrets()
        except RuntimeError as e:
            # Settings validation reports whatever is still missing
            print(f"Error loading secrets from Secrets Manager: {e}")

    return Settings()


def parse_service_account_key(raw: str) -> Dict[str, Any]:
    """
    Decode the service account JSON blob.

    Raises:
        ValueError: If the blob is not a JSON object
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Service account key must be a JSON object")
    return data


# Export singleton instance
settings = get_settings()
