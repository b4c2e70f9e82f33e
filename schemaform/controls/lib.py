"""Reactive control model.

A compiled form is a tree of controls:

- LeafControl: one scalar value plus its validators.
- GroupControl: named children in insertion order.
- CollectionControl: an ordered list of children of one shape.

Every control carries an enabled flag. Disabled controls keep their value
but are left out of their parent's aggregate ``value`` and never make the
parent invalid.

Change propagation is synchronous. Writing a leaf recalculates it, then
walks up the parent chain. A group that receives a change runs its
internal watchers (enable-if predicates and reactive rules such as the
conditional engine) until nothing they touched is still pending, then
emits exactly one event on ``value_changes`` and only then hands the
change to its own parent. Changes made by a watcher while its group is
settling are folded into that one event instead of re-entering.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from enum import Enum
from typing import Any

from schemaform.config import get_max_settle_passes
from schemaform.core.log import get_logger
from schemaform.validators import ValidationErrors, Validator, run_validators

logger = get_logger("controls")

EnablePredicate = Callable[[Any], bool]
Watcher = Callable[["GroupControl"], None]


class ControlStatus(str, Enum):
    """Validation status of a control."""

    VALID = "VALID"
    INVALID = "INVALID"
    DISABLED = "DISABLED"


# =============================================================================
# Notification Streams
# =============================================================================


class Subscription:
    """Handle returned by ValueStream.subscribe."""

    def __init__(self, stream: ValueStream, callback: Callable[[Any], None]):
        self._stream = stream
        self.callback = callback
        self.closed = False

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._stream._remove(self)


class ValueStream:
    """Synchronous list of value-change callbacks."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(self, callback: Callable[[Any], None]) -> Subscription:
        """Register a callback invoked with each new value.

        Args:
            callback: Called synchronously with the emitted value.

        Returns:
            Subscription whose ``unsubscribe()`` stops delivery.
        """
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def emit(self, value: Any) -> None:
        # Snapshot so callbacks may unsubscribe while being delivered to.
        for subscription in list(self._subscriptions):
            if not subscription.closed:
                subscription.callback(value)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)


# =============================================================================
# Base Control
# =============================================================================


class Control:
    """State shared by leaves, groups and collections.

    Attributes:
        parent: Owning group or collection, None for the root.
        name: Key under which the parent holds this control.
        schema: Schema node the control was compiled from, if any.
        enable_if: Optional predicate over the parent's aggregate value;
            the parent group re-evaluates it on every change it settles.
        value_changes: Stream of this control's value after each change.
    """

    kind = "control"

    def __init__(
        self,
        validators: list[Validator] | None = None,
        *,
        schema: Mapping[str, Any] | None = None,
        enable_if: EnablePredicate | None = None,
    ):
        self.parent: GroupControl | CollectionControl | None = None
        self.name: str | None = None
        self.schema = schema
        self.enable_if = enable_if
        self.value_changes = ValueStream()
        self.status = ControlStatus.VALID
        self.errors: ValidationErrors | None = None
        self._enabled = True
        self._validators: list[Validator] = []
        self.set_validators(validators or [])

    # -------------------------------------------------------------------------
    # Tree position
    # -------------------------------------------------------------------------

    @property
    def root(self) -> Control:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def path(self) -> str:
        """Dotted path from the root, empty for the root itself."""
        parts: list[str] = []
        node: Control | None = self
        while node is not None and node.parent is not None:
            parts.append(str(node.name))
            node = node.parent
        return ".".join(reversed(parts))

    # -------------------------------------------------------------------------
    # Validators (ordered, no duplicates)
    # -------------------------------------------------------------------------

    @property
    def validators(self) -> tuple[Validator, ...]:
        return tuple(self._validators)

    def has_validator(self, validator: Validator) -> bool:
        return validator in self._validators

    def add_validator(self, validator: Validator) -> bool:
        """Attach a validator unless it is already attached.

        Validity is not recalculated; call ``update_value_and_validity``.

        Returns:
            True if the validator was added.
        """
        if validator in self._validators:
            return False
        self._validators.append(validator)
        return True

    def remove_validator(self, validator: Validator) -> bool:
        if validator not in self._validators:
            return False
        self._validators.remove(validator)
        return True

    def set_validators(self, validators: list[Validator]) -> None:
        self._validators = []
        for validator in validators:
            self.add_validator(validator)

    def clear_validators(self) -> None:
        self._validators = []

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def disabled(self) -> bool:
        return not self._enabled

    @property
    def valid(self) -> bool:
        return self.status == ControlStatus.VALID

    @property
    def invalid(self) -> bool:
        return self.status == ControlStatus.INVALID

    def has_error(self, key: str) -> bool:
        return bool(self.errors) and key in self.errors

    def get_error(self, key: str) -> Any:
        if not self.errors:
            return None
        return self.errors.get(key)

    def enable(self, emit_event: bool = True) -> None:
        """Enable this control and everything below it."""
        self._set_enabled(True)
        self.update_value_and_validity(emit_event)

    def disable(self, emit_event: bool = True) -> None:
        """Disable this control and everything below it.

        The value is kept but drops out of the parent's aggregate value.
        """
        self._set_enabled(False)
        self.update_value_and_validity(emit_event)

    def _set_enabled(self, enabled: bool) -> None:
        for child in self._children():
            child._set_enabled(enabled)
        self._enabled = enabled
        self._recalculate()

    # -------------------------------------------------------------------------
    # Propagation
    # -------------------------------------------------------------------------

    @property
    def value(self) -> Any:
        raise NotImplementedError

    @property
    def raw_value(self) -> Any:
        return self.value

    def update_value_and_validity(self, emit_event: bool = True) -> None:
        """Recalculate this control, notify, and propagate to the parent.

        Args:
            emit_event: Emit on ``value_changes`` along the way. Silent
                updates still recalculate validity up the chain.
        """
        self._recalculate()
        if emit_event:
            self.value_changes.emit(self.value)
        if self.parent is not None:
            self.parent.update_value_and_validity(emit_event)

    def _recalculate(self) -> None:
        if not self._enabled:
            self.errors = None
            self.status = ControlStatus.DISABLED
            return
        self.errors = run_validators(self._validators, self.value)
        invalid = self.errors is not None or any(
            child.status == ControlStatus.INVALID
            for child in self._children()
            if child.enabled
        )
        self.status = ControlStatus.INVALID if invalid else ControlStatus.VALID

    def _children(self) -> list[Control]:
        return []

    def __repr__(self) -> str:
        label = self.path or "<root>"
        return f"{type(self).__name__}({label!r}, status={self.status.value})"


# =============================================================================
# Leaf
# =============================================================================


class LeafControl(Control):
    """A single scalar value (string, number, boolean or null)."""

    kind = "leaf"

    def __init__(
        self,
        value: Any = None,
        validators: list[Validator] | None = None,
        *,
        schema: Mapping[str, Any] | None = None,
        enable_if: EnablePredicate | None = None,
    ):
        self._value = value
        super().__init__(validators, schema=schema, enable_if=enable_if)
        self._recalculate()

    @property
    def value(self) -> Any:
        return self._value

    def set_value(self, value: Any, emit_event: bool = True) -> None:
        """Write a new value and propagate the change.

        Args:
            value: Any primitive or None.
            emit_event: Notify subscribers and reactive rules.
        """
        self._value = value
        self.update_value_and_validity(emit_event)


# =============================================================================
# Group
# =============================================================================


class GroupControl(Control):
    """Named child controls, kept in insertion order.

    The aggregate ``value`` maps each enabled child's name to its value;
    ``raw_value`` includes disabled children too.
    """

    kind = "group"

    def __init__(
        self,
        controls: Mapping[str, Control] | None = None,
        validators: list[Validator] | None = None,
        *,
        schema: Mapping[str, Any] | None = None,
        enable_if: EnablePredicate | None = None,
    ):
        self._controls: dict[str, Control] = {}
        self._watchers: list[Watcher] = []
        self._settling = False
        self._dirty = False
        super().__init__(validators, schema=schema, enable_if=enable_if)
        for name, control in (controls or {}).items():
            self._register(name, control)
        self._recalculate()

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    @property
    def controls(self) -> dict[str, Control]:
        return dict(self._controls)

    def _children(self) -> list[Control]:
        return list(self._controls.values())

    def _set_enabled(self, enabled: bool) -> None:
        super()._set_enabled(enabled)
        if not enabled:
            return
        # The cascade also switched on controls a rule keeps off; rules
        # with a ``restore`` hook put them back.
        for watcher in list(self._watchers):
            restore = getattr(watcher, "restore", None)
            if restore is not None:
                restore(self)

    def contains(self, name: str) -> bool:
        """Check for an enabled child called ``name``."""
        control = self._controls.get(name)
        return control is not None and control.enabled

    def __contains__(self, name: object) -> bool:
        return name in self._controls

    def __iter__(self) -> Iterator[str]:
        return iter(self._controls)

    def __len__(self) -> int:
        return len(self._controls)

    def __getitem__(self, name: str) -> Control:
        return self._controls[name]

    def get(self, path: str | list[str]) -> Control | None:
        """Find a descendant by name or dotted path.

        Args:
            path: ``"name"``, ``"outer.inner"`` or a list of segments;
                collection items are addressed by index.

        Returns:
            The control, or None when any segment is missing.
        """
        segments = path.split(".") if isinstance(path, str) else list(path)
        node: Control | None = self
        for segment in segments:
            if isinstance(node, GroupControl):
                node = node._controls.get(segment)
            elif isinstance(node, CollectionControl):
                try:
                    node = node.at(int(segment))
                except (ValueError, IndexError):
                    return None
            else:
                return None
            if node is None:
                return None
        return node

    def add_control(
        self, name: str, control: Control, emit_event: bool = True
    ) -> Control:
        """Add a child under a unique name.

        If the name is taken the existing child is kept and returned.
        """
        if name in self._controls:
            return self._controls[name]
        self._register(name, control)
        self.update_value_and_validity(emit_event)
        return control

    def remove_control(self, name: str, emit_event: bool = True) -> Control | None:
        control = self._controls.pop(name, None)
        if control is None:
            return None
        control.parent = None
        self.update_value_and_validity(emit_event)
        return control

    def _register(self, name: str, control: Control) -> None:
        control.parent = self
        control.name = name
        self._controls[name] = control

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    @property
    def value(self) -> dict[str, Any]:
        return {
            name: control.value
            for name, control in self._controls.items()
            if control.enabled
        }

    @property
    def raw_value(self) -> dict[str, Any]:
        return {name: control.raw_value for name, control in self._controls.items()}

    def patch_value(self, values: Mapping[str, Any], emit_event: bool = True) -> None:
        """Write several descendants at once with a single notification.

        Unknown names are ignored. Nested mappings patch nested groups,
        which settle and emit on their own before this group does.
        """
        was_settling = self._settling
        self._settling = True
        try:
            for name, value in values.items():
                control = self._controls.get(name)
                if isinstance(control, GroupControl) and isinstance(value, Mapping):
                    control.patch_value(value, emit_event)
                elif isinstance(control, LeafControl):
                    control.set_value(value, emit_event)
        finally:
            self._settling = was_settling
        self.update_value_and_validity(emit_event)

    # -------------------------------------------------------------------------
    # Reactive rules
    # -------------------------------------------------------------------------

    def add_watcher(self, watcher: Watcher) -> None:
        """Register an internal rule run whenever this group settles.

        A watcher may also define ``restore(group)``, called after the
        group is enabled again.
        """
        if watcher not in self._watchers:
            self._watchers.append(watcher)

    def remove_watcher(self, watcher: Watcher) -> None:
        if watcher in self._watchers:
            self._watchers.remove(watcher)

    @property
    def settling(self) -> bool:
        return self._settling

    def update_value_and_validity(self, emit_event: bool = True) -> None:
        self._recalculate()
        if self._settling:
            # A watcher of this group caused the change; the running settle
            # loop picks it up and emits once when it finishes.
            self._dirty = True
            return
        if emit_event:
            self._settle()
            self.value_changes.emit(self.value)
        if self.parent is not None:
            self.parent.update_value_and_validity(emit_event)

    def _settle(self) -> None:
        limit = get_max_settle_passes()
        self._settling = True
        try:
            for _ in range(limit):
                self._dirty = False
                self._apply_enable_if()
                for watcher in list(self._watchers):
                    watcher(self)
                self._recalculate()
                if not self._dirty:
                    return
            logger.warning(
                "Group %r still changing after %d settle passes",
                self.path or "<root>",
                limit,
            )
        finally:
            self._settling = False

    def _apply_enable_if(self) -> None:
        for control in self._controls.values():
            if control.enable_if is None:
                continue
            wanted = bool(control.enable_if(self.value))
            if wanted and control.disabled:
                control.enable(emit_event=False)
            elif not wanted and control.enabled:
                control.disable(emit_event=False)


# =============================================================================
# Collection
# =============================================================================


class CollectionControl(Control):
    """Ordered list of child controls sharing one shape.

    Collections are created empty; the host adds items.
    """

    kind = "collection"

    def __init__(
        self,
        items: list[Control] | None = None,
        validators: list[Validator] | None = None,
        *,
        schema: Mapping[str, Any] | None = None,
        enable_if: EnablePredicate | None = None,
    ):
        self._items: list[Control] = []
        super().__init__(validators, schema=schema, enable_if=enable_if)
        for item in items or []:
            item.parent = self
            self._items.append(item)
        self._reindex()
        self._recalculate()

    def _children(self) -> list[Control]:
        return list(self._items)

    @property
    def items(self) -> list[Control]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Control]:
        return iter(list(self._items))

    def at(self, index: int) -> Control:
        return self._items[index]

    def append(self, control: Control, emit_event: bool = True) -> None:
        self.insert(len(self._items), control, emit_event)

    def insert(self, index: int, control: Control, emit_event: bool = True) -> None:
        control.parent = self
        self._items.insert(index, control)
        self._reindex()
        self.update_value_and_validity(emit_event)

    def remove_at(self, index: int, emit_event: bool = True) -> Control:
        control = self._items.pop(index)
        control.parent = None
        self._reindex()
        self.update_value_and_validity(emit_event)
        return control

    def clear(self, emit_event: bool = True) -> None:
        for control in self._items:
            control.parent = None
        self._items = []
        self.update_value_and_validity(emit_event)

    @property
    def value(self) -> list[Any]:
        return [item.value for item in self._items if item.enabled]

    @property
    def raw_value(self) -> list[Any]:
        return [item.raw_value for item in self._items]

    def _reindex(self) -> None:
        for index, item in enumerate(self._items):
            item.name = str(index)


__all__ = [
    "ControlStatus",
    "Control",
    "LeafControl",
    "GroupControl",
    "CollectionControl",
    "ValueStream",
    "Subscription",
    "EnablePredicate",
    "Watcher",
]
