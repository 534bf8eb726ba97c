# backend/padsync/pads/service.py
import logging
from dataclasses import dataclass
from ..locks.manager import LockManager
from .sanitize import sanitize_html
from .store import DocumentStore

logger = logging.getLogger(__name__)

SAVED = "Saved!"
LOCKED_BY_OTHER = "Locked by another user."


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    message: str


def save_pad(
    manager: LockManager,
    docs: DocumentStore,
    key: str,
    caller_id: int,
    new_content: str,
) -> SaveResult:
    """
    이전 폴링 결과는 믿지 않고 잠금을 다시 확인한 뒤 저장.
    잠금 자체는 갱신하지 않음.
    """
    with manager.writable(key, caller_id) as ok:
        if not ok:
            logger.warning("save of %s by user %s rejected: locked by another user", key, caller_id)
            return SaveResult(False, LOCKED_BY_OTHER)
        docs.put(key, sanitize_html(new_content), user_id=caller_id)

    logger.info("pad %s saved by user %s", key, caller_id)
    return SaveResult(True, SAVED)
