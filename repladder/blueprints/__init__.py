from typing import Any, Dict, Iterable

from flask import abort, request


def json_object(text_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """JSON-Body als dict; 400 bei anderem Typ oder nicht-textuellen Feldern."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        abort(400, description="Request body must be a JSON object")
    for name in text_fields:
        value = payload.get(name)
        if value is not None and not isinstance(value, str):
            abort(400, description=f"{name} must be a string")
    return payload
