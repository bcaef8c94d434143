from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None, message: Optional[str] = None, status_code: int = 200) -> JSONResponse:
    """Wrap ``data`` in the ``{success, message?, data?}`` envelope."""
    content = {"success": True}
    if message is not None:
        content["message"] = message
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})
