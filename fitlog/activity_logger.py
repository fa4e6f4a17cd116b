# backend/fitlog/activity_logger.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from . import db
from .models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

SUCCESS = "SUCCESS"
ERROR = "ERROR"
IN_PROGRESS = "IN_PROGRESS"


def log_activity(
    category: str,
    operation: str,
    message: str,
    status: str,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Persist an operational event and commit it.

    A failed write is logged and rolled back; it never propagates into the
    request that triggered it.
    """
    try:
        db.session.add(
            ActivityLog(
                category=category,
                operation=operation,
                message=message,
                status=status,
                details=details,
            )
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to log activity %s/%s", category, operation)
