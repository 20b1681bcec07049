"""Named extension points.

Handlers register against an extension point either as a filter (receives a
value, returns the possibly changed value) or as an action (side effect,
return value ignored). The application builds one :class:`HookRegistry` at
startup from :data:`EVENT_HOOKS` and keeps it for the life of the process.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple

from event_calendar import handlers

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


@dataclass
class _Callback:
    handler: Callable
    priority: int
    accepted_args: int
    order: int


class HookSpec(NamedTuple):
    kind: str
    extension_point: str
    handler: Callable
    priority: int = DEFAULT_PRIORITY
    accepted_args: int = 1


@dataclass
class HookRegistry:
    callbacks: Dict[str, List[_Callback]] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)
    _counter: int = 0

    def _add(self, name: str, handler: Callable, priority: int, accepted_args: int) -> None:
        self._counter += 1
        entries = self.callbacks.setdefault(name, [])
        entries.append(_Callback(handler, priority, accepted_args, self._counter))
        entries.sort(key=lambda item: (item.priority, item.order))

    def add_filter(self, name: str, handler: Callable, priority: int = DEFAULT_PRIORITY, accepted_args: int = 1) -> None:
        self._add(name, handler, priority, accepted_args)

    def add_action(self, name: str, handler: Callable, priority: int = DEFAULT_PRIORITY, accepted_args: int = 1) -> None:
        self._add(name, handler, priority, accepted_args)

    def has(self, name: str, handler: Callable | None = None) -> bool:
        entries = self.callbacks.get(name, [])
        if handler is None:
            return bool(entries)
        return any(entry.handler is handler for entry in entries)

    def remove(self, name: str, handler: Callable) -> bool:
        entries = self.callbacks.get(name, [])
        kept = [entry for entry in entries if entry.handler is not handler]
        self.callbacks[name] = kept
        return len(kept) != len(entries)

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for entry in self.callbacks.get(name, []):
            call_args = (value, *args)[: max(entry.accepted_args, 1)]
            value = entry.handler(*call_args)
        return value

    async def do_action(self, name: str, *args: Any) -> None:
        for entry in self.callbacks.get(name, []):
            call_args = args[: entry.accepted_args]
            result = entry.handler(*call_args)
            if inspect.isawaitable(result):
                await result
        logger.debug("Ran action %s (%d callbacks)", name, len(self.callbacks.get(name, [])))


EVENT_HOOKS = [
    # Statuses & taxonomies
    HookSpec("action", "init", handlers.register_post_statuses),
    HookSpec("action", "init", handlers.register_taxonomies),
    # Caps
    HookSpec("filter", "map_meta_cap", handlers.event_meta_caps, 10, 3),
    HookSpec("filter", "map_meta_cap", handlers.type_meta_caps, 10, 3),
    HookSpec("filter", "map_meta_cap", handlers.category_meta_caps, 10, 3),
    HookSpec("filter", "map_meta_cap", handlers.tag_meta_caps, 10, 3),
    # Saving
    HookSpec("filter", "save_event", handlers.metabox_save),
    # List table columns
    HookSpec("filter", "event_columns", handlers.manage_posts_columns),
    HookSpec("filter", "event_column_data", handlers.manage_custom_column_data, 10, 3),
    HookSpec("filter", "event_sortable_columns", handlers.sortable_columns),
    HookSpec("filter", "pre_get_events", handlers.maybe_sort_by_fields, 10, 2),
    HookSpec("filter", "pre_get_events", handlers.maybe_filter_by_fields, 10, 2),
    # Cron
    HookSpec("action", "update_events", handlers.update_post_statuses),
]


def register_event_hooks(registry: HookRegistry, specs: List[HookSpec] | None = None) -> HookRegistry:
    for spec in specs if specs is not None else EVENT_HOOKS:
        if spec.kind == "filter":
            registry.add_filter(spec.extension_point, spec.handler, spec.priority, spec.accepted_args)
        elif spec.kind == "action":
            registry.add_action(spec.extension_point, spec.handler, spec.priority, spec.accepted_args)
        else:
            raise ValueError(f"Unknown hook kind: {spec.kind!r}")
    return registry


def build_registry() -> HookRegistry:
    return register_event_hooks(HookRegistry())
