"""Tests for AWS Lambda handler."""

import base64
import json

from lambda_handler import lambda_handler


class TestLambdaHandler:
    """Test the Lambda handler routes and responses."""

    def test_health_check(self):
        """GET /health returns healthy status."""
        event = {"httpMethod": "GET", "path": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "healthy"
        assert "environment" in body

    def test_api_info(self):
        """GET /api lists every calculation endpoint."""
        event = {"httpMethod": "GET", "path": "/api"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "ok"
        assert body["endpoints"]["basket"] == "/basket [POST]"
        assert body["endpoints"]["basket_apply_target"] == "/basket/apply_target [POST]"
        assert body["endpoints"]["health"] == "/health [GET]"

    def test_cors_preflight(self):
        """OPTIONS requests return CORS headers."""
        event = {"httpMethod": "OPTIONS", "path": "/basket"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert "Access-Control-Allow-Origin" in response["headers"]
        assert "Access-Control-Allow-Methods" in response["headers"]

    def test_not_found(self):
        """Unknown paths return 404."""
        event = {"httpMethod": "GET", "path": "/unknown"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 404

    def test_not_found_reports_path_and_preflight_has_empty_body(self):
        response = lambda_handler({"httpMethod": "DELETE", "path": "/basket"}, None)

        assert response["statusCode"] == 404
        assert json.loads(response["body"]) == {"error": "Not found", "path": "/basket"}
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"

        preflight = lambda_handler({"httpMethod": "OPTIONS", "path": "/snapshot"}, None)
        assert preflight["body"] == ""

    def test_get_on_post_route_not_found(self):
        event = {"httpMethod": "GET", "path": "/basket"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 404

    def test_basket_success(self):
        """POST /basket apportions the selected professionals."""
        payload = {
            "value_of_works": 1000000,
            "vat_pct": 15,
            "selected_rows": ["quantity_surveyor"],
        }

        event = {"httpMethod": "POST", "path": "/basket", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["summary"]["subtotal"]["value"] == 155500.0
        assert body["summary"]["total"]["value"] == 178825.0

    def test_apply_target_success(self):
        payload = {"value_of_works": 1000000, "target_pct": 10, "selected_rows": ["quantity_surveyor"]}

        event = {"httpMethod": "POST", "path": "/basket/apply_target", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["discount_pct"] == 35.69

    def test_single_fee_success(self):
        payload = {"discipline": "engineer_structural", "value_of_works": 1000000}

        event = {"httpMethod": "POST", "path": "/fee", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["base_fee"] == 128800.0

    def test_base64_body(self):
        """API Gateway may deliver the body base64 encoded."""
        payload = json.dumps({"area": 1000, "vat_pct": 15}).encode("utf-8")
        event = {
            "httpMethod": "POST",
            "path": "/bim",
            "body": base64.b64encode(payload).decode("ascii"),
            "isBase64Encoded": True,
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["summary"]["subtotal"]["value"] == 20600.0

    def test_empty_body(self):
        """POST with empty body returns 400."""
        event = {"httpMethod": "POST", "path": "/basket", "body": ""}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "failed"

    def test_invalid_json(self):
        """POST with invalid JSON returns 400."""
        event = {"httpMethod": "POST", "path": "/basket", "body": "not valid json"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "Invalid JSON" in body["error"]

    def test_validation_error(self):
        """POST with an unknown BIM method returns 400."""
        event = {"httpMethod": "POST", "path": "/bim", "body": json.dumps({"method": "per_day"})}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "validation_failed"

    def test_http_api_format(self):
        """Supports HTTP API v2 event format."""
        event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_http_api_post(self):
        event = {
            "requestContext": {"http": {"method": "POST"}},
            "rawPath": "/hourly",
            "body": json.dumps({"project_name": "Villa", "phases": []}),
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["project_name"] == "Villa"
