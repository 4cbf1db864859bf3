"""
AWS Lambda Handler for the Webhook Relay

This module provides the serverless entry point using the Mangum adapter to
convert the ASGI FastAPI application to the AWS Lambda handler format.

The FastAPI lifespan is disabled under Mangum, so the Firestore client is
built here once per cold start.
"""

from mangum import Mangum

from app.main import app, startup
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

startup()

# api_gateway_base_path is set to "/" to let Mangum handle stage prefixes automatically
handler = Mangum(app, lifespan="off", api_gateway_base_path="/")


def lambda_handler(event, context):
    """
    AWS Lambda handler function with invocation logging.

    Args:
        event: API Gateway event containing HTTP request details
        context: Lambda context with runtime information

    Returns:
        API Gateway response format
    """
    logger.info(
        "Lambda invocation started",
        extra={
            "request_id": context.aws_request_id,
            "function_name": context.function_name,
            "remaining_time": context.get_remaining_time_in_millis(),
            "http_method": event.get("requestContext", {}).get("http", {}).get("method"),
            "raw_path": event.get("rawPath"),
        },
    )

    try:
        response = handler(event, context)

        logger.info(
            "Lambda invocation completed",
            extra={
                "request_id": context.aws_request_id,
                "status_code": response.get("statusCode"),
            },
        )

        return response

    except Exception as e:
        logger.error(
            f"Lambda invocation failed: {e}",
            extra={
                "request_id": context.aws_request_id,
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        raise


__all__ = ["handler", "lambda_handler"]
