from typing import Any, Optional
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [_dump(item) for item in data]
    if isinstance(data, dict):
        return {key: _dump(value) for key, value in data.items()}
    return data


def send_response(
    status_code: int,
    message: str,
    data: Any = None,
    meta: Optional[BaseModel] = None,
    success: bool = True,
) -> JSONResponse:
    """Wrap a payload in the {success, statusCode, message, data, meta} envelope."""
    content = {
        "success": success,
        "statusCode": status_code,
        "message": message,
        "data": _dump(data),
    }
    if meta is not None:
        content["meta"] = _dump(meta)

    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def error_response(
    status_code: int,
    message: str,
    error_messages: list,
    stack: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    content = {
        "success": False,
        "message": message,
        "errorMessages": error_messages,
    }
    if stack is not None:
        content["stack"] = stack

    return JSONResponse(status_code=status_code, content=content, headers=headers)
