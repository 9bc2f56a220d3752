from taxengine.audit.engine import readiness_for, run_audit
from taxengine.audit.rules import AUDIT_RULES

__all__ = ["AUDIT_RULES", "readiness_for", "run_audit"]
