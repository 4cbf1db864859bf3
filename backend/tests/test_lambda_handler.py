"""
Test AWS Lambda Entry Point

Drives the app through Mangum with API Gateway HTTP API (v2) events.
"""

from types import SimpleNamespace
from typing import Dict, Optional

import pytest

from lambda_handler import lambda_handler
from tests.factories import encode, make_event, sign


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="req-123",
        function_name="securascan-relay",
        memory_limit_in_mb=256,
        get_remaining_time_in_millis=lambda: 30000,
    )


def http_api_event(method: str, path: str, body: str = "", headers: Optional[Dict[str, str]] = None):
    return {
        "version": "2.0",
        "routeKey": "$default",
        "rawPath": path,
        "rawQueryString": "",
        "headers": {"host": "relay.example.com", **(headers or {})},
        "requestContext": {
            "accountId": "123456789012",
            "apiId": "api123",
            "domainName": "relay.example.com",
            "http": {
                "method": method,
                "path": path,
                "protocol": "HTTP/1.1",
                "sourceIp": "203.0.113.10",
                "userAgent": "Razorpay-Webhook/v1",
            },
            "requestId": "req-123",
            "routeKey": "$default",
            "stage": "$default",
        },
        "body": body,
        "isBase64Encoded": False,
    }


def test_lambda_root(lambda_context):
    response = lambda_handler(http_api_event("GET", "/"), lambda_context)

    assert response["statusCode"] == 200
    assert response["body"] == "SecuraScan Backend Server is running."


def test_lambda_webhook(lambda_context, configured_secret, fake_store):
    body = encode(make_event(notes={"user_id": "u1", "plan": "Business"}))

    response = lambda_handler(
        http_api_event(
            "POST",
            "/razorpay-webhook",
            body=body.decode("utf-8"),
            headers={
                "content-type": "application/json",
                "x-razorpay-signature": sign(body),
            },
        ),
        lambda_context,
    )

    assert response["statusCode"] == 200
    assert response["body"] == "Webhook processed successfully."
    assert fake_store.users["u1"]["scansRemaining"] == -1


def test_lambda_webhook_missing_signature(lambda_context, configured_secret, fake_store):
    body = encode(make_event())

    response = lambda_handler(
        http_api_event("POST", "/razorpay-webhook", body=body.decode("utf-8")),
        lambda_context,
    )

    assert response["statusCode"] == 400
    assert fake_store.reads == []
