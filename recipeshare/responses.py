from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .schemas import Envelope


def to_wire(data: Any) -> Any:
    """Dump schemas (or lists of them) with their camelCase aliases."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [to_wire(item) for item in data]
    return jsonable_encoder(data)


def envelope(
    message: str,
    data: Any = None,
    status_code: int = 200,
    success: bool = True,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = Envelope(success=success, message=message, data=to_wire(data))
    return JSONResponse(
        status_code=status_code, content=body.model_dump(), headers=headers
    )
