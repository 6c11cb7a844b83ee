"""
AWS Lambda handler for the Fee Proposal Calculator API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging
import os

from fee_engine import FeeProcessor

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Deployment stage reported by /health and /api (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Built once per container and reused across warm invocations
processor = FeeProcessor()

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}

# POST path -> (log label, processor method)
POST_ROUTES = {
    "/fee": ("discipline fee", processor.calculate_single_fee),
    "/basket": ("basket of fees", processor.process_basket_from_dict),
    "/basket/apply_target": ("basket target", processor.apply_target_from_dict),
    "/sacap": ("SACAP stages", processor.process_sacap_from_dict),
    "/bim": ("BIM estimate", processor.process_bim_from_dict),
    "/hourly": ("hourly billing", processor.process_hourly_from_dict),
    "/snapshot": ("fee snapshot", processor.process_snapshot_from_dict),
}


def _response(status_code, payload=None):
    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": "" if payload is None else json.dumps(payload),
    }


def _event_method(event):
    # REST API events carry httpMethod; HTTP API v2 events nest it under requestContext
    return event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - POST /fee, /basket, /basket/apply_target, /sacap, /bim, /hourly, /snapshot
    - OPTIONS (CORS preflight)
    """
    method = _event_method(event)
    if method == "OPTIONS":
        return _response(200)

    path = event.get("path") or event.get("rawPath", "")

    if method == "GET" and path == "/health":
        return handle_health()
    if method == "GET" and path == "/api":
        return handle_api_info()
    if method == "POST" and path in POST_ROUTES:
        label, handler = POST_ROUTES[path]
        return handle_post(event, label, handler)

    return _response(404, {"error": "Not found", "path": path})


def handle_health():
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """Service description with one entry per route."""
    endpoints = {path.strip("/").replace("/", "_"): f"{path} [POST]" for path in POST_ROUTES}
    endpoints["health"] = "/health [GET]"
    return _response(200, {
        "status": "ok",
        "message": "Fee Proposal Calculator API",
        "version": "1.0",
        "environment": ENVIRONMENT,
        "runtime": "AWS Lambda",
        "endpoints": endpoints,
    })


def _parse_body(event):
    """Decode the request body, or return None when it is empty."""
    body = event.get("body", "")
    if not isinstance(body, str):
        return body
    if not body:
        return None
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def handle_post(event, label, handler):
    """Run one fee calculation from an API Gateway event body."""
    try:
        input_data = _parse_body(event)
        if input_data is None:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        logger.info(f"Processing {label}")
        result = handler(input_data)
        logger.info(f"{label} processed successfully")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError, AttributeError) as e:
        # Raised by parsing and validation (unknown enums, malformed sections)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Details go to the log only; the caller gets a generic message
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during processing", "status": "failed"})
