"""
Audit logging for business mutations.

Every change to a medicine or a new bill is written as one JSON line
to the "audit" logger so it can be shipped to centralized logging.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Separate logger for audit events
audit_logger = logging.getLogger("audit")


class AuditLog:
    """Central audit logging for inventory and billing events."""

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete"
        resource_type: str,  # "medicine", "bill"
        resource_id: str,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a business mutation.

        Usage:
            AuditLog.log_action("update", "medicine", "m1", changes={"stock": 18})
            AuditLog.log_action("create", "bill", bill.id, changes={"final_amount": "9.00"})
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": f"{resource_type}.{action}",
            "resource_id": resource_id,
        }

        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_partial_failure(
        resource_type: str,
        resource_id: str,
        step: str,
        reason: str,
    ):
        """
        Log a multi-step write that failed after earlier steps were persisted.

        No rollback exists, so these entries are the trail for manual repair.
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_severity": "WARNING",
            "event_type": f"{resource_type}.partial_failure",
            "resource_id": resource_id,
            "step": step,
            "reason": reason,
        }

        audit_logger.warning(json.dumps(log_entry, default=str))
