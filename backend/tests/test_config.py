"""
Tests for Application Configuration
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.config import (
    EXECUTION_MODE_SERVERLESS,
    Settings,
    load_lambda_secrets,
    parse_service_account_key,
)


def test_defaults(monkeypatch):
    for variable in ("APP_ID", "PORT", "EXECUTION_MODE"):
        monkeypatch.delenv(variable, raising=False)

    settings = Settings(_env_file=None)

    assert settings.app_id == "securascan-prod"
    assert settings.port == 8080
    assert settings.execution_mode == "server"
    assert settings.cors_origins == ["*"]


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("RAZORPAY_WEBHOOK_SECRET", "from-env")
    monkeypatch.setenv("APP_ID", "securascan-staging")
    monkeypatch.setenv("PORT", "9000")

    settings = Settings(_env_file=None)

    assert settings.razorpay_webhook_secret == "from-env"
    assert settings.app_id == "securascan-staging"
    assert settings.port == 9000


@pytest.mark.parametrize(
    "field,value",
    [
        ("log_level", "LOUD"),
        ("environment", "qa"),
        ("execution_mode", "daemon"),
        ("port", 0),
        ("port", 70000),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_values_normalized():
    settings = Settings(
        _env_file=None, log_level="debug", environment="PRODUCTION", execution_mode="Serverless"
    )

    assert settings.log_level == "DEBUG"
    assert settings.is_production
    assert settings.execution_mode == EXECUTION_MODE_SERVERLESS


def test_is_serverless(monkeypatch):
    monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)

    assert not Settings(_env_file=None, execution_mode="server").is_serverless
    assert Settings(_env_file=None, execution_mode="serverless").is_serverless

    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "securascan-relay")
    assert Settings(_env_file=None, execution_mode="server").is_serverless


def test_validate_required_secrets():
    settings = Settings(_env_file=None, razorpay_webhook_secret=None, firebase_service_account_key=None)

    assert settings.validate_required_secrets() == [
        "razorpay_webhook_secret",
        "firebase_service_account_key",
    ]

    settings = Settings(_env_file=None, razorpay_webhook_secret="s", firebase_service_account_key="{}")
    assert settings.validate_required_secrets() == []


def test_parse_service_account_key():
    assert parse_service_account_key('{"project_id": "p"}') == {"project_id": "p"}

    with pytest.raises(ValueError):
        parse_service_account_key("[]")

    with pytest.raises(ValueError):
        parse_service_account_key("not json")


def test_load_lambda_secrets():
    environ = {
        "AWS_REGION": "ap-south-1",
        "RAZORPAY_WEBHOOK_SECRET_ARN": "arn:aws:secretsmanager:ap-south-1:1:secret:rzp",
        "FIREBASE_SERVICE_ACCOUNT_KEY_ARN": "arn:aws:secretsmanager:ap-south-1:1:secret:fb",
    }

    with patch("app.config.boto3") as mock_boto3:
        mock_boto3.client.return_value.get_secret_value.side_effect = [
            {"SecretString": "rzp-secret"},
            {"SecretString": '{"project_id": "p"}'},
        ]
        injected = load_lambda_secrets(environ)

    assert injected == ["RAZORPAY_WEBHOOK_SECRET", "FIREBASE_SERVICE_ACCOUNT_KEY"]
    assert environ["RAZORPAY_WEBHOOK_SECRET"] == "rzp-secret"
    assert environ["FIREBASE_SERVICE_ACCOUNT_KEY"] == '{"project_id": "p"}'
    mock_boto3.client.assert_called_with("secretsmanager", region_name="ap-south-1")


def test_load_lambda_secrets_keeps_existing_values():
    environ = {
        "RAZORPAY_WEBHOOK_SECRET": "already-set",
        "RAZORPAY_WEBHOOK_SECRET_ARN": "arn:aws:secretsmanager:us-east-1:1:secret:rzp",
    }

    with patch("app.config.boto3") as mock_boto3:
        injected = load_lambda_secrets(environ)

    assert injected == []
    assert environ["RAZORPAY_WEBHOOK_SECRET"] == "already-set"
    mock_boto3.client.assert_not_called()


def test_load_lambda_secrets_failure():
    environ = {"RAZORPAY_WEBHOOK_SECRET_ARN": "arn:aws:secretsmanager:us-east-1:1:secret:rzp"}

    with patch("app.config.boto3") as mock_boto3:
        mock_boto3.client.return_value.get_secret_value.side_effect = Exception("AccessDenied")
        with pytest.raises(RuntimeError):
            load_lambda_secrets(environ)
