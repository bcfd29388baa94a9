from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

from flask import jsonify

ToastType = Literal["success", "error"]


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of a dashboard mutation.

    Carries the human-readable message and its kind to the caller instead
    of encoding them in a redirect URL. `data` holds optional ids the
    client may need (e.g. a newly created row).
    """
    message: str
    type: ToastType = "success"
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, message: str, **data: Any) -> "ActionResult":
        return cls(message=message, type="success", data=data)

    @classmethod
    def error(cls, message: str) -> "ActionResult":
        return cls(message=message, type="error")

    @property
    def ok(self) -> bool:
        return self.type == "success"

    def to_dict(self) -> Dict[str, str]:
        return {"message": self.message, "type": self.type}


def toast_response(result: ActionResult, status: Optional[int] = None):
    body: Dict[str, Any] = {"toast": result.to_dict()}
    body.update(result.data)
    return jsonify(body), status or (200 if result.ok else 400)
