import logging
import datetime

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("rpg")

def write_audit(store, action, subject_id, before, after):
    store.audit_logs.insert({
        "ts": datetime.datetime.utcnow().isoformat() + "Z",
        "action": action, "subject_id": subject_id,
        "before": before, "after": after
    })
