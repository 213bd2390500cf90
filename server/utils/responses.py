"""Standardized API response helpers.

Ensures consistent response structure across all endpoints.
All successful responses include {"success": True, ...}
"""


def success_response(data: dict, **extras) -> dict:
    """Standard success response wrapper.

    Usage:
        return success_response({"contestants": [c.to_dict() for c in contestants]})

    Returns:
        {"success": True, **data, **extras}
    """
    return {"success": True, **data, **extras}


def error_response(message: str, **extras) -> dict:
    """Standard error response body.

    Returns:
        {"success": False, "message": message, **extras}
    """
    return {"success": False, "message": message, **extras}
