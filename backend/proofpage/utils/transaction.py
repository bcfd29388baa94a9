from contextlib import contextmanager
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from proofpage.extensions import db
from proofpage.domain.exceptions import PersistenceError


@contextmanager
def transactional(session=None, *, integrity_message="Could not save changes."):
    """Context manager for database transactions."""
    session = session or db.session
    try:
        yield session
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        current_app.logger.warning("Integrity error: %s", exc.orig)
        raise PersistenceError(integrity_message) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        current_app.logger.error("Database error: %s", exc)
        raise PersistenceError("Could not save changes.") from exc
    except Exception:
        session.rollback()
        raise
