# backend/padsync/client/poller.py
from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import httpx

from .controller import PadLockController
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class HeartbeatPoller:
    """
    하트비트 루프. 붙어 있는 모든 컨트롤러의 필드를 한 요청에 모아 보내고
    응답 하나를 모두에게 나눠준다.

    start() 직후 바로 1회 전송, 이후 interval 마다.
    """

    def __init__(self, transport: HttpTransport, *, interval: float = 15.0):
        self.transport = transport
        self.interval = interval
        self._controllers: list[PadLockController] = []
        self._mu = threading.Lock()
        self._wake = threading.Event()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def attach(self, controller: PadLockController) -> None:
        with self._mu:
            if controller not in self._controllers:
                self._controllers.append(controller)

    def detach(self, controller: PadLockController) -> None:
        with self._mu:
            if controller in self._controllers:
                self._controllers.remove(controller)

    def beat(self) -> bool:
        with self._mu:
            controllers = list(self._controllers)

        data: dict[str, Any] = {}
        for c in controllers:
            c.on_heartbeat_send(data)

        try:
            response = self.transport.heartbeat(data)
        except (httpx.HTTPError, ValueError) as exc:
            # 다음 주기에 다시 시도. 상태는 그대로
            logger.warning("heartbeat failed: %s", exc)
            return False

        interval = response.get("heartbeat_interval")
        if isinstance(interval, (int, float)) and interval > 0:
            self.interval = float(interval)

        for c in controllers:
            c.on_heartbeat_tick(response)
        return True

    # ------------------------
    # 루프
    # ------------------------
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._wake.clear()
        self._thread = threading.Thread(target=self._run, name="heartbeat", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        self._wake.set()
        if self._thread is not None:
            self._thread.join(timeout)
            # 전송 중이라 아직 안 끝났으면 그대로 둔다 (start 가 두 번째 루프를 띄우지 않게)
            if not self._thread.is_alive():
                self._thread = None

    def connect_now(self) -> None:
        """대기 중인 주기를 건너뛰고 바로 전송"""
        self._wake.set()

    def _run(self) -> None:
        while not self._stopped.is_set():
            self.beat()
            self._wake.wait(self.interval)
            self._wake.clear()
