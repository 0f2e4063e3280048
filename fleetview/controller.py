"""
Scan controller.

Two-state machine (idle/active) that starts and stops the scan source and
owns the periodic status sweep.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Optional

from .context import FleetContext
from .exceptions import CapabilityUnavailable, NoValidProfiles, ScanSourceError, UserDeclined
from .models import ConditionKind, RawAdvertisement
from .scan_source import ScanHandle, ScanSource


class ScanState(str, Enum):
    """Controller states."""
    IDLE = 'idle'
    ACTIVE = 'active'

    def __str__(self) -> str:
        return self.value


class ScanController:
    """
    Sequences scan start/stop and the periodic sweep for one FleetContext.

    All work runs on the event loop: advertisement callbacks and sweep ticks
    never overlap, so the registry needs no locking.
    """

    def __init__(self, context: FleetContext, scan_source: ScanSource):
        self._context = context
        self._scan_source = scan_source
        self._state = ScanState.IDLE
        self._handle: Optional[ScanHandle] = None
        self._sweep_task: Optional[asyncio.Task] = None
        self._start_task: Optional[asyncio.Future] = None
        self._accepting = False

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == ScanState.ACTIVE

    @property
    def context(self) -> FleetContext:
        return self._context

    async def start(self) -> ScanState:
        """
        Start scanning.

        A start() issued while another is waiting on the scan source joins
        that request instead of issuing a second one.

        Returns:
            The resulting state. Rejections by the scan source are reported
            as conditions and leave the controller idle.

        Raises:
            NoValidProfiles: The configured profiles yield no scan filters.
        """
        if self._state == ScanState.ACTIVE:
            self._context.sink.info('scan_already_active')
            return self._state

        if self._start_task is not None:
            self._context.sink.info('scan_start_pending')
            return await asyncio.shield(self._start_task)

        self._start_task = asyncio.ensure_future(self._begin_scan())
        try:
            return await self._start_task
        finally:
            self._start_task = None

    async def _begin_scan(self) -> ScanState:
        filters = self._context.build_filters()
        if not filters:
            message = "No valid profiles configured; scan cannot start"
            self._context.report(ConditionKind.CONFIGURATION_ERROR, message)
            raise NoValidProfiles(message)

        self._context.sink.info('scan_requested', filters=len(filters))

        # Advertisements may arrive before request_scan returns
        self._accepting = True
        try:
            handle = await self._scan_source.request_scan(
                filters,
                self._context.config.scan_options,
                self._on_advertisement,
            )
        except ScanSourceError as e:
            self._accepting = False
            if isinstance(e, UserDeclined):
                kind = ConditionKind.USER_DECLINED
            elif isinstance(e, CapabilityUnavailable):
                kind = ConditionKind.CAPABILITY_UNAVAILABLE
            else:
                kind = ConditionKind.SCAN_FAILED
            self._context.report(kind, str(e))
            return self._set_state(ScanState.IDLE)
        except asyncio.CancelledError:
            self._accepting = False
            raise

        self._handle = handle
        self._sweep_task = asyncio.create_task(self._run_sweep())
        self._context.sink.info('scan_active', filters=len(filters))
        return self._set_state(ScanState.ACTIVE)

    async def stop(self) -> ScanState:
        """
        Stop scanning.

        A pending start() is allowed to settle first. The sweep task is then
        cancelled and awaited before the scan source is halted, so no sweep
        runs once this returns. Stop failures are reported and the controller
        still ends up idle.
        """
        if self._start_task is not None:
            await asyncio.wait({self._start_task})

        if self._state == ScanState.IDLE:
            return self._state

        self._accepting = False
        try:
            await self._cancel_sweep()
            handle, self._handle = self._handle, None
            if handle is not None:
                await handle.stop()
            self._context.sink.info('scan_stopped')
        except ScanSourceError as e:
            self._context.report(ConditionKind.STOP_FAILED, str(e))
        finally:
            self._handle = None
            self._set_state(ScanState.IDLE)

        return self._state

    async def toggle(self) -> ScanState:
        """Stop when active, start otherwise."""
        if self._state == ScanState.ACTIVE:
            return await self.stop()
        return await self.start()

    def _on_advertisement(self, advertisement: RawAdvertisement) -> None:
        if not self._accepting:
            return
        self._context.handle_advertisement(advertisement)

    async def _run_sweep(self) -> None:
        period = self._context.config.sweep_period_seconds
        while True:
            await asyncio.sleep(period)
            try:
                self._context.sweep()
            except Exception as e:
                # Keep sweeping after a failed tick
                self._context.report(ConditionKind.SWEEP_FAILED, f"Status sweep failed: {e}")

    async def _cancel_sweep(self) -> None:
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            self._context.sink.error('sweep_task_failed', error=str(e))

    def _set_state(self, state: ScanState) -> ScanState:
        if state != self._state:
            self._state = state
            self._context.presenter.on_state_changed(state.value)
        return self._state
