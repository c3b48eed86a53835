from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import List, Optional
import logging
import threading
import time
import uuid

from salesage.config.env import get_email_config
from salesage.messaging.composer import EmailRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentEmail:
    id: str
    to: str
    subject: str
    sent_at: str
    request: EmailRequest


class Outbox:
    """Simulated mail delivery: records messages in memory instead of sending them."""

    def __init__(self, delay_sec: Optional[float] = None, sender: Optional[str] = None, keep: int = 100):
        cfg = get_email_config()
        self.delay_sec = cfg.send_delay_sec if delay_sec is None else delay_sec
        self.sender = sender or cfg.sender
        # most recent sends only
        self._sent: deque[SentEmail] = deque(maxlen=keep)
        self._lock = threading.Lock()

    def send(self, request: EmailRequest, delay_sec: Optional[float] = None) -> SentEmail:
        delay = self.delay_sec if delay_sec is None else delay_sec
        logger.info("simulated email from %s to %s: %r (%d months)",
                    self.sender, request.to, request.subject, request.forecast.get("timeframe", 0))
        if delay > 0:
            time.sleep(delay)
        receipt = SentEmail(
            id=f"m_{uuid.uuid4().hex[:8]}",
            to=request.to,
            subject=request.subject,
            sent_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            request=request,
        )
        with self._lock:
            self._sent.append(receipt)
        return receipt

    def sent(self) -> List[SentEmail]:
        with self._lock:
            return list(self._sent)

    def clear(self) -> None:
        with self._lock:
            self._sent.clear()
