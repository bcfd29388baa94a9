from typing import Optional
from flask import current_app, has_request_context
from flask_jwt_extended import current_user


def _actor_id() -> Optional[str]:
    if not has_request_context():
        return None
    try:
        return current_user.id if current_user else None
    except RuntimeError:
        # No JWT was verified for this request (public endpoints)
        return None


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
):
    current_app.logger.info(
        "action=%s entity=%s:%s actor=%s payload=%s",
        action,
        entity_type,
        entity_id,
        _actor_id() or "-",
        payload or {},
    )
