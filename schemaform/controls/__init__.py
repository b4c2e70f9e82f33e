"""Reactive control model: leaves, groups and collections."""

from .lib import (
    CollectionControl,
    Control,
    ControlStatus,
    EnablePredicate,
    GroupControl,
    LeafControl,
    Subscription,
    ValueStream,
    Watcher,
)

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
