# livechart/data/scheduler.py
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import timedelta

from PyQt6.QtCore import QObject, QTimer, pyqtSignal, pyqtSlot

from livechart import config
from livechart.chart.viewport import ViewportController

from .buffer import SeriesBuffer
from .errors import OutOfOrderError, SourceUnavailable
from .sources import DataSource

log = logging.getLogger(__name__)


class UpdateScheduler(QObject):
    """
    Timer périodique : 1 tick = 1 point demandé à la source.
    - le fetch tourne dans un worker (1 thread) : jamais deux fetchs en vol,
      un tick qui tombe pendant un fetch est ignoré
    - le résultat revient sur le thread du scheduler via un signal (queued),
      seul ce thread écrit dans le buffer et le viewport
    """
    tickCompleted     = pyqtSignal(int)    # nouvelle longueur du buffer
    tickSkipped       = pyqtSignal()
    sourceFailed      = pyqtSignal(str)
    staleChanged      = pyqtSignal(bool)
    invariantViolated = pyqtSignal(str)

    # interne : worker -> thread Qt
    _fetched = pyqtSignal(int, str, object)   # (génération, type, résultat)

    def __init__(self, source: DataSource, buffer: SeriesBuffer, viewport: ViewportController,
                 interval_ms: int = config.UPDATE_INTERVAL_MS,
                 strict: bool = config.STRICT_INVARIANTS, parent=None):
        super().__init__(parent)
        self.source = source
        self.buffer = buffer
        self.viewport = viewport
        self.interval_ms = interval_ms
        self.strict = strict

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fetch")
        self._future: Future | None = None
        self._generation = 0
        self._running = False
        self._stale = False

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.fire)

        self._fetched.connect(self._on_fetched)

    # ---------- lifecycle ----------
    @property
    def running(self) -> bool:
        return self._running

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def busy(self) -> bool:
        return self._future is not None and not self._future.done()

    def start(self):
        if self._running:
            return
        self._running = True
        self._timer.start()
        log.info("⏱️ scheduler démarré (%d ms, source=%s)", self.interval_ms, self.source.name)

    def stop(self):
        """Coupe le timer et abandonne le fetch en cours (résultat ignoré s'il arrive)."""
        self._timer.stop()
        self._generation += 1
        if self._future is not None:
            self._future.cancel()
            self._future = None
        if self._running:
            log.info("⏹️ scheduler arrêté")
        self._running = False

    def shutdown(self):
        self.stop()
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ---------- ticks ----------
    @pyqtSlot()
    def fire(self) -> bool:
        """Un tick. Retourne False si ignoré (fetch encore en vol)."""
        if self.busy:
            log.debug("tick ignoré: fetch en cours")
            self.tickSkipped.emit()
            return False
        self._submit("point", self.source.next_point)
        return True

    def load_history(self, count: int) -> bool:
        """Pré-remplit le buffer via le même worker (count points espacés d'un tick)."""
        if count <= 0:
            return False
        if self.busy:
            return False
        interval = timedelta(milliseconds=self.interval_ms)
        self._submit("history", lambda: self.source.history(count, interval))
        return True

    # ---------- interne ----------
    def _submit(self, kind: str, fn):
        gen = self._generation

        def _job():
            try:
                return fn()
            except SourceUnavailable as e:
                return e
            except Exception as e:
                # toute panne de source = transitoire, retry au prochain tick
                return SourceUnavailable(f"{type(e).__name__}: {e}")

        def _done(fut: Future):
            # stop() entre-temps : on ne remonte rien
            if fut.cancelled() or gen != self._generation:
                return
            # émis depuis le worker -> connexion queued vers ce thread
            self._fetched.emit(gen, kind, fut.result())

        self._future = self._executor.submit(_job)
        self._future.add_done_callback(_done)

    @pyqtSlot(int, str, object)
    def _on_fetched(self, gen: int, kind: str, result):
        if gen != self._generation:
            log.debug("résultat %s d'une génération close ignoré", kind)
            return
        self._future = None

        if isinstance(result, SourceUnavailable):
            log.warning("⚠️ source indisponible (%s): %s", self.source.name, result)
            self._set_stale(True)
            self.sourceFailed.emit(str(result))
            return

        try:
            if kind == "history":
                self.buffer.extend(result)
                log.info("📦 historique: %d points", len(result))
            else:
                self.buffer.append(result)
        except OutOfOrderError as e:
            log.error("❌ append refusé: %s", e)
            self.invariantViolated.emit(str(e))
            if self.strict:
                raise
            return

        self._set_stale(False)
        self.viewport.on_buffer_grew(self.buffer.length())
        self.tickCompleted.emit(self.buffer.length())

    def _set_stale(self, stale: bool):
        if stale == self._stale:
            return
        self._stale = stale
        self.staleChanged.emit(stale)
