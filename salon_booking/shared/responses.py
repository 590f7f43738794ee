"""Response envelope shared by every router"""

from typing import Any


def ok(data: Any = None, message: str = "OK") -> dict[str, Any]:
    """Standard ``{success, message, data}`` envelope"""
    return {"success": True, "message": message, "data": data}


__all__ = ["ok"]
