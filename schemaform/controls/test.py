"""Unit tests for the control model."""

import pytest

from schemaform.controls import (
    CollectionControl,
    ControlStatus,
    GroupControl,
    LeafControl,
    ValueStream,
)
from schemaform.validators import const, pattern, required


def _form() -> GroupControl:
    return GroupControl(
        {
            "x": LeafControl(),
            "y": LeafControl("fixed"),
            "inner": GroupControl({"z": LeafControl(1)}),
        }
    )


class TestValueStream:
    """Tests for synchronous subscriptions."""

    @pytest.mark.unit
    def test_subscribe_and_emit(self):
        """Subscribers receive emitted values in order."""
        stream = ValueStream()
        received = []
        stream.subscribe(received.append)
        stream.emit(1)
        stream.emit(2)
        assert received == [1, 2]

    @pytest.mark.unit
    def test_unsubscribe(self):
        """Unsubscribed callbacks are not called again."""
        stream = ValueStream()
        received = []
        subscription = stream.subscribe(received.append)
        subscription.unsubscribe()
        subscription.unsubscribe()
        stream.emit(1)
        assert received == []
        assert stream.subscriber_count == 0

    @pytest.mark.unit
    def test_unsubscribe_during_delivery(self):
        """A callback may unsubscribe itself while being delivered to."""
        stream = ValueStream()
        received = []

        def once(value):
            received.append(value)
            subscription.unsubscribe()

        subscription = stream.subscribe(once)
        stream.emit("a")
        stream.emit("b")
        assert received == ["a"]


class TestLeafControl:
    """Tests for scalar controls."""

    @pytest.mark.unit
    def test_initial_value(self):
        """Leaves default to None and are valid without validators."""
        leaf = LeafControl()
        assert leaf.value is None
        assert leaf.valid

    @pytest.mark.unit
    def test_validators_run_on_set_value(self):
        """Validity follows the current value."""
        leaf = LeafControl(validators=[required])
        assert leaf.invalid
        assert leaf.has_error("required")
        leaf.set_value("x")
        assert leaf.valid
        assert leaf.errors is None

    @pytest.mark.unit
    def test_validator_set_semantics(self):
        """The same validator is never attached twice."""
        leaf = LeafControl(validators=[required, required])
        assert leaf.validators == (required,)
        assert leaf.add_validator(required) is False
        assert leaf.remove_validator(required) is True
        assert leaf.remove_validator(required) is False

    @pytest.mark.unit
    def test_disable_keeps_value(self):
        """Disabled leaves keep their value and report DISABLED."""
        leaf = LeafControl("v", validators=[const("w")])
        assert leaf.invalid
        leaf.disable()
        assert leaf.status == ControlStatus.DISABLED
        assert leaf.errors is None
        assert leaf.value == "v"
        leaf.enable()
        assert leaf.invalid

    @pytest.mark.unit
    def test_get_error(self):
        """Error details are retrievable by key."""
        leaf = LeafControl("abc", validators=[pattern("^\\d+$")])
        assert leaf.get_error("pattern")["actual_value"] == "abc"
        assert leaf.get_error("required") is None

    @pytest.mark.unit
    def test_value_changes(self):
        """Leaves emit their own value changes."""
        leaf = LeafControl()
        received = []
        leaf.value_changes.subscribe(received.append)
        leaf.set_value("a")
        leaf.set_value("b", emit_event=False)
        assert received == ["a"]
        assert leaf.value == "b"


class TestGroupControl:
    """Tests for named control groups."""

    @pytest.mark.unit
    def test_value_in_insertion_order(self):
        """Aggregate value mirrors children in order."""
        form = _form()
        assert list(form.value) == ["x", "y", "inner"]
        assert form.value == {"x": None, "y": "fixed", "inner": {"z": 1}}

    @pytest.mark.unit
    def test_disabled_children_excluded(self):
        """Disabled children drop out of value but not raw_value."""
        form = _form()
        form["y"].disable()
        assert form.value == {"x": None, "inner": {"z": 1}}
        assert form.raw_value["y"] == "fixed"
        assert not form.contains("y")
        assert "y" in form

    @pytest.mark.unit
    def test_disabled_children_do_not_invalidate(self):
        """Only enabled children contribute to validity."""
        form = GroupControl({"x": LeafControl(validators=[required])})
        assert form.invalid
        form["x"].disable()
        assert form.valid

    @pytest.mark.unit
    def test_nested_validity(self):
        """Invalid grandchildren make the root invalid."""
        form = _form()
        inner_z = form.get("inner.z")
        inner_z.add_validator(const(2))
        inner_z.update_value_and_validity()
        assert form.get("inner").invalid
        assert form.invalid
        inner_z.set_value(2)
        assert form.valid

    @pytest.mark.unit
    def test_get_paths(self):
        """Dotted and list paths resolve; missing ones return None."""
        form = _form()
        assert form.get("inner.z") is form["inner"]["z"]
        assert form.get(["inner", "z"]) is form.get("inner.z")
        assert form.get("inner.missing") is None
        assert form.get("x.deeper") is None

    @pytest.mark.unit
    def test_getitem_missing_raises(self):
        """Item access raises KeyError for unknown names."""
        with pytest.raises(KeyError):
            _form()["nope"]

    @pytest.mark.unit
    def test_add_control_keeps_first(self):
        """Names are unique; the first control wins."""
        form = _form()
        original = form["x"]
        returned = form.add_control("x", LeafControl("other"))
        assert returned is original
        assert form.value["x"] is None

    @pytest.mark.unit
    def test_remove_control(self):
        """Removed controls are detached."""
        form = _form()
        removed = form.remove_control("x")
        assert removed is not None and removed.parent is None
        assert "x" not in form
        assert form.remove_control("x") is None

    @pytest.mark.unit
    def test_path(self):
        """Paths are dotted names from the root."""
        form = _form()
        assert form.path == ""
        assert form.get("inner.z").path == "inner.z"
        assert form.get("inner.z").root is form

    @pytest.mark.unit
    def test_one_event_per_write(self):
        """Each ancestor emits once per leaf write."""
        form = _form()
        root_events = []
        inner_events = []
        form.value_changes.subscribe(root_events.append)
        form["inner"].value_changes.subscribe(inner_events.append)
        form.get("inner.z").set_value(5)
        assert inner_events == [{"z": 5}]
        assert root_events == [{"x": None, "y": "fixed", "inner": {"z": 5}}]

    @pytest.mark.unit
    def test_patch_value_single_event(self):
        """Patching many leaves emits one root event."""
        form = _form()
        events = []
        form.value_changes.subscribe(events.append)
        form.patch_value({"x": "a", "inner": {"z": 9}, "unknown": 1})
        assert events == [{"x": "a", "y": "fixed", "inner": {"z": 9}}]

    @pytest.mark.unit
    def test_disable_cascades(self):
        """Disabling a group disables its children."""
        form = _form()
        form["inner"].disable()
        assert form.get("inner.z").disabled
        assert "inner" not in form.value
        form["inner"].enable()
        assert form.get("inner.z").enabled


class TestWatchers:
    """Tests for settling and internal watchers."""

    @pytest.mark.unit
    def test_watcher_changes_fold_into_one_event(self):
        """Mutations made by a watcher do not emit separately."""
        form = GroupControl({"a": LeafControl(), "b": LeafControl()})
        events = []

        def mirror(group):
            if group["b"].value != group["a"].value:
                group["b"].set_value(group["a"].value)

        form.add_watcher(mirror)
        form.value_changes.subscribe(events.append)
        form["a"].set_value("v")
        assert events == [{"a": "v", "b": "v"}]

    @pytest.mark.unit
    def test_watcher_registered_once(self):
        """Adding the same watcher twice keeps one copy."""
        form = GroupControl({"a": LeafControl()})
        calls = []

        def count(_group):
            calls.append(1)

        form.add_watcher(count)
        form.add_watcher(count)
        form["a"].set_value(1)
        assert calls == [1]
        form.remove_watcher(count)
        form["a"].set_value(2)
        assert calls == [1]

    @pytest.mark.unit
    def test_runaway_watcher_is_bounded(self, monkeypatch, caplog):
        """A watcher that never settles stops at the configured bound."""
        monkeypatch.setenv("SCHEMAFORM_MAX_SETTLE_PASSES", "3")
        form = GroupControl({"n": LeafControl(0)})
        calls = []

        def bump(group):
            calls.append(1)
            group["n"].set_value(group["n"].value + 1)

        form.add_watcher(bump)
        form["n"].set_value(1)
        assert len(calls) == 3
        assert "settle passes" in caplog.text

    @pytest.mark.unit
    def test_enable_if(self):
        """Enable-if predicates follow the group value, cascading."""
        form = GroupControl(
            {
                "x": LeafControl(),
                "y": LeafControl(enable_if=lambda value: value.get("x") == "x"),
                "z": LeafControl(enable_if=lambda value: value.get("y") == "y"),
            }
        )
        form["x"].set_value("x")
        assert form["y"].enabled
        assert form["z"].disabled
        form["y"].set_value("y")
        assert form["z"].enabled
        form["x"].set_value("other")
        assert form["y"].disabled
        assert form["z"].disabled
        assert form.value == {"x": "other"}


class TestCollectionControl:
    """Tests for ordered collections."""

    @pytest.mark.unit
    def test_starts_empty(self):
        """Collections are created empty."""
        collection = CollectionControl()
        assert len(collection) == 0
        assert collection.value == []

    @pytest.mark.unit
    def test_items_and_names(self):
        """Items are indexed by position."""
        collection = CollectionControl()
        collection.append(LeafControl("a"))
        collection.insert(0, LeafControl("b"))
        assert collection.value == ["b", "a"]
        assert [item.name for item in collection] == ["0", "1"]
        removed = collection.remove_at(0)
        assert removed.value == "b"
        assert collection.at(0).name == "0"

    @pytest.mark.unit
    def test_disabled_items_excluded(self):
        """Disabled items drop out of the value."""
        collection = CollectionControl([LeafControl("a"), LeafControl("b")])
        collection.at(0).disable()
        assert collection.value == ["b"]
        assert collection.raw_value == ["a", "b"]

    @pytest.mark.unit
    def test_item_validity_propagates(self):
        """Invalid items invalidate the collection and its group."""
        form = GroupControl({"list": CollectionControl()})
        form["list"].append(LeafControl(validators=[required]))
        assert form.invalid
        form.get("list.0").set_value("ok")
        assert form.valid

    @pytest.mark.unit
    def test_clear(self):
        """Clearing detaches every item."""
        collection = CollectionControl([LeafControl("a")])
        item = collection.at(0)
        collection.clear()
        assert len(collection) == 0
        assert item.parent is None

    @pytest.mark.unit
    def test_index_errors(self):
        """Out-of-range access raises IndexError."""
        with pytest.raises(IndexError):
            CollectionControl().at(0)
