# app/schemas/common.py
# Response envelope shared by the demo-mode routers
from typing import Any, Dict, Optional


def success(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Wrap a payload as {"success": true, "data": ...}"""
    response: Dict[str, Any] = {"success": True}
    if message:
        response["message"] = message
    if data is not None:
        response["data"] = data
    return response
