"""
API Gateway proxy response helpers.
"""
import json
from typing import Any, Dict

from pydantic import BaseModel

JSON_HEADERS = {"Content-Type": "application/json"}

def json_response(status_code: int, body: BaseModel) -> Dict[str, Any]:
    """Build a proxy response from a pydantic model."""
    return {
        "statusCode": status_code,
        "headers": JSON_HEADERS,
        "body": body.model_dump_json()
    }

def error_response(status_code: int, message: str, **details: Any) -> Dict[str, Any]:
    """Build a proxy error response."""
    return {
        "statusCode": status_code,
        "headers": JSON_HEADERS,
        "body": json.dumps({"error": message, **details}, default=str)
    }
