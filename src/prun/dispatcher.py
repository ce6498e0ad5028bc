"""Slot dispatch: prompt for a missing command, then run pre, cmd, post."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from prun.config import GlobalConfig
from prun.errors import ExitCode, NoSessionError
from prun.executors import ShellExecutor, TmuxExecutor
from prun.host import Host
from prun.models import validate_slot_index
from prun.resolve import Phase, resolve
from prun.router import TargetRouter
from prun.store import ProjectStore
from prun.template import SessionNameProvider, TemplateContext, TmuxSessionProbe, expand

logger = py_logging.getLogger(__name__)

NOTIFY_PREFIX = "[prun]"


class DispatchState(str, Enum):
    AWAITING_COMMAND = "awaiting_command"
    READY = "ready"
    COMPLETED = "completed"
    ABORTED = "aborted"
    CANCELLED = "cancelled"


@dataclass
class DispatchResult:
    slot: int
    state: DispatchState
    executed: list[Phase] = field(default_factory=list)
    failed_phase: Phase | None = None
    exit_code: ExitCode = ExitCode.SUCCESS

    @property
    def finished(self) -> bool:
        return self.state in (DispatchState.COMPLETED, DispatchState.ABORTED, DispatchState.CANCELLED)


def default_router(config: GlobalConfig, host: Host) -> TargetRouter:
    return TargetRouter(
        tmux=TmuxExecutor(config.window_id, environ=host.environ),
        shell=ShellExecutor(),
    )


class Dispatcher:
    def __init__(
        self,
        store: ProjectStore,
        host: Host,
        *,
        config: Callable[[], GlobalConfig],
        persist: Callable[[], None],
        router_factory: Callable[[GlobalConfig, Host], TargetRouter] = default_router,
        session_name: SessionNameProvider | None = None,
    ) -> None:
        self.store = store
        self.host = host
        self._config = config
        self._persist = persist
        self._router_factory = router_factory
        self._session_name = session_name or TmuxSessionProbe(host.environ)

    def run(
        self,
        index: int,
        on_complete: Callable[[DispatchResult], None] | None = None,
    ) -> DispatchResult:
        index = validate_slot_index(index)
        slot = self.store.slot(index)
        if slot.cmd:
            result = self._dispatch(index)
            if on_complete is not None:
                on_complete(result)
            return result

        def _on_input(value: str | None) -> None:
            if not value:
                logger.debug("Command prompt cancelled for slot=%s", index)
                result = DispatchResult(slot=index, state=DispatchState.CANCELLED)
                if on_complete is not None:
                    on_complete(result)
                return
            self.store.slot(index).cmd = value
            self._persist()
            self.run(index, on_complete)

        logger.debug("Slot %s has no command; prompting", index)
        self.host.input(f"Set command for slot {index}", "", _on_input)
        return DispatchResult(slot=index, state=DispatchState.AWAITING_COMMAND)

    def _dispatch(self, index: int) -> DispatchResult:
        config = self._config()
        state = self.store.state
        sequence = resolve(state.slot(index), state, config)
        router = self._router_factory(config, self.host)
        context = TemplateContext(
            file_path=self.host.current_file(),
            cwd=self.host.cwd(),
            window_id=config.window_id,
            session_name=self._session_name,
        )
        result = DispatchResult(slot=index, state=DispatchState.READY)
        for phase, raw in sequence.phases():
            failure_code = ExitCode.RUNTIME_ERROR
            routed = router.route(raw)
            body = expand(routed.body, context)
            self.host.notify(f"{NOTIFY_PREFIX} {phase.value} ➜ {body}", py_logging.INFO)
            logger.info("Dispatching slot=%s phase=%s target=%s", index, phase.value, routed.kind.value)
            try:
                ok = routed.executor(body)
            except NoSessionError as exc:
                self.host.notify(f"{NOTIFY_PREFIX} {exc.message}", py_logging.ERROR)
                failure_code = exc.code
                ok = False
            result.executed.append(phase)
            if not ok:
                logger.warning("Slot %s aborted at phase=%s", index, phase.value)
                result.state = DispatchState.ABORTED
                result.failed_phase = phase
                result.exit_code = failure_code
                return result
        result.state = DispatchState.COMPLETED
        return result
