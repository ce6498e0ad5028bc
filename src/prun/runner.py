"""Public operations over one project's slots."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Mapping

from prun.config import ConfigOptions, GlobalConfig, merge_config
from prun.dispatcher import NOTIFY_PREFIX, DispatchResult, Dispatcher, default_router
from prun.errors import PrunError
from prun.host import Host
from prun.models import SLOT_FIELDS, SLOT_INDICES, Slot, validate_slot_index
from prun.router import TargetRouter
from prun.store import ProjectStore
from prun.template import SessionNameProvider

logger = py_logging.getLogger(__name__)

EMPTY_LABEL = "<empty>"
MANAGE_ACTIONS = ("Run", "Edit", "Delete")


class ProjectRunner:
    """Explicit context for a working directory: config, cached state, host.

    The project file is read once on first access and written after every
    mutation. Save failures are reported through the host and do not undo the
    in-memory change.
    """

    def __init__(
        self,
        host: Host,
        *,
        config: GlobalConfig | None = None,
        store: ProjectStore | None = None,
        router_factory: Callable[[GlobalConfig, Host], TargetRouter] = default_router,
        session_name: SessionNameProvider | None = None,
    ) -> None:
        self.host = host
        self.config = config or GlobalConfig()
        self.store = store or ProjectStore(host.cwd())
        self.dispatcher = Dispatcher(
            self.store,
            host,
            config=lambda: self.config,
            persist=self.persist,
            router_factory=router_factory,
            session_name=session_name,
        )

    def configure(self, options: ConfigOptions | Mapping[str, object] | None = None) -> GlobalConfig:
        self.config = merge_config(self.config, options)
        logger.debug("Runner configured window=%s", self.config.window_id)
        return self.config

    def list(self) -> dict[int, Slot]:
        return {index: slot.model_copy(deep=True) for index, slot in self.store.state.slots.items()}

    def persist(self) -> bool:
        try:
            self.store.save()
        except PrunError as exc:
            logger.error("Project save failed: %s", exc)
            self.host.notify(f"{NOTIFY_PREFIX} {exc}", py_logging.ERROR)
            return False
        return True

    def run(
        self,
        index: int,
        on_complete: Callable[[DispatchResult], None] | None = None,
    ) -> DispatchResult:
        return self.dispatcher.run(index, on_complete)

    def edit(self, index: int) -> None:
        index = validate_slot_index(index)

        def _on_field(field: str | None, _: int | None) -> None:
            if field not in SLOT_FIELDS:
                return
            slot = self.store.slot(index)

            def _on_value(value: str | None) -> None:
                if value is None:
                    return
                setattr(self.store.slot(index), field, value)
                self.persist()
                self.host.notify(f"{NOTIFY_PREFIX} updated", py_logging.INFO)

            self.host.input(f"Edit {field} for {index}", getattr(slot, field), _on_value)

        self.host.select(list(SLOT_FIELDS), "Field to edit", _on_field)

    def delete(self, index: int) -> None:
        self.store.slot(validate_slot_index(index)).clear()
        self.persist()
        self.host.notify(f"{NOTIFY_PREFIX} cleared {index}", py_logging.INFO)

    def set_project_defaults(self, pre: str | None = None, post: str | None = None) -> None:
        state = self.store.state
        if pre is not None:
            state.project_default_pre = pre
        if post is not None:
            state.project_default_post = post
        self.persist()
        self.host.notify(f"{NOTIFY_PREFIX} Project defaults saved", py_logging.INFO)

    def slot_labels(self) -> list[str]:
        slots = self.store.state.slots
        return [f"{index}: {slots[index].cmd or EMPTY_LABEL}" for index in SLOT_INDICES]

    def manage(self) -> None:
        def _on_slot(_: str | None, position: int | None) -> None:
            if position is None:
                return
            index = SLOT_INDICES[position]

            def _on_action(action: str | None, _: int | None) -> None:
                if action == "Run":
                    self.run(index)
                elif action == "Edit":
                    self.edit(index)
                elif action == "Delete":
                    self.delete(index)

            self.host.select(list(MANAGE_ACTIONS), "Action", _on_action)

        self.host.select(self.slot_labels(), "Manage slot", _on_slot)
