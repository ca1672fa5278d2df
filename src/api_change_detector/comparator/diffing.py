"""
Generic keyed diff.

Every structural comparator matches two collections by an identity key
and reacts to keys present on one side only, or on both. The routines
here implement that skeleton once so that each protocol only supplies
the key and the three handlers.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Hashable, Optional, TypeVar

from api_change_detector.models.change import Change, ChangeCategory, ChangeType, Severity

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

SPEC_PATH = "spec"


def index_by(items: Optional[Iterable[T]], key: Callable[[T], K]) -> dict[K, T]:
    """
    Index items by key, keeping the first item seen for a duplicate key.

    Args:
        items: Items to index. None is treated as empty.
        key: Identity key extractor.

    Returns:
        Insertion-ordered mapping of key to item.
    """
    index: dict[K, T] = {}
    for item in items or ():
        index.setdefault(key(item), item)
    return index


def diff_keyed(
    old_items: Optional[Iterable[T]],
    new_items: Optional[Iterable[T]],
    key: Callable[[T], K],
    on_added: Callable[[T], list[Change]],
    on_removed: Callable[[T], list[Change]],
    on_matched: Callable[[T, T], list[Change]],
) -> list[Change]:
    """
    Diff two collections by identity key.

    Changes are emitted in a fixed order: additions (new-side order),
    then removals (old-side order), then matched pairs (new-side order).

    Args:
        old_items: Items of the old version.
        new_items: Items of the new version.
        key: Identity key extractor.
        on_added: Called with each item present only in the new version.
        on_removed: Called with each item present only in the old version.
        on_matched: Called with (old, new) for each key present on both sides.

    Returns:
        Flattened list of changes produced by the handlers.
    """
    old_index = index_by(old_items, key)
    new_index = index_by(new_items, key)

    changes: list[Change] = []
    for item_key, item in new_index.items():
        if item_key not in old_index:
            changes.extend(on_added(item))
    for item_key, item in old_index.items():
        if item_key not in new_index:
            changes.extend(on_removed(item))
    for item_key, item in new_index.items():
        if item_key in old_index:
            changes.extend(on_matched(old_index[item_key], item))
    return changes


def diff_mapping(
    old_map: Optional[Mapping[K, T]],
    new_map: Optional[Mapping[K, T]],
    on_added: Callable[[K, T], list[Change]],
    on_removed: Callable[[K, T], list[Change]],
    on_matched: Callable[[K, T, T], list[Change]],
) -> list[Change]:
    """Diff two mappings by their keys; handlers also receive the key."""
    return diff_keyed(
        (old_map or {}).items(),
        (new_map or {}).items(),
        key=lambda entry: entry[0],
        on_added=lambda entry: on_added(entry[0], entry[1]),
        on_removed=lambda entry: on_removed(entry[0], entry[1]),
        on_matched=lambda old, new: on_matched(old[0], old[1], new[1]),
    )


def diff_values(
    old_values: Optional[Iterable[str]],
    new_values: Optional[Iterable[str]],
    on_added: Callable[[str], list[Change]],
    on_removed: Callable[[str], list[Change]],
) -> list[Change]:
    """Diff two collections of plain strings (enum values, member names)."""
    return diff_keyed(
        old_values,
        new_values,
        key=lambda value: value,
        on_added=on_added,
        on_removed=on_removed,
        on_matched=lambda old, new: [],
    )


def make_change(
    change_type: ChangeType,
    category: ChangeCategory,
    severity: Severity,
    path: str,
    description: str,
    old_value: Any = None,
    new_value: Any = None,
) -> Change:
    """Build a change record."""
    return Change(
        type=change_type,
        category=category,
        severity=severity,
        path=path,
        description=description,
        old_value=old_value,
        new_value=new_value,
    )


def deprecation_changes(
    old_deprecated: bool,
    new_deprecated: bool,
    category: ChangeCategory,
    path: str,
    label: str,
) -> list[Change]:
    """
    Report a deprecation flag transition.

    false -> true is a DEPRECATED/WARNING change, true -> false a
    MODIFIED/INFO change.
    """
    if not old_deprecated and new_deprecated:
        return [
            make_change(
                ChangeType.DEPRECATED,
                category,
                Severity.WARNING,
                path,
                f"{label} marked as deprecated",
                old_value=False,
                new_value=True,
            )
        ]
    if old_deprecated and not new_deprecated:
        return [
            make_change(
                ChangeType.MODIFIED,
                category,
                Severity.INFO,
                path,
                f"{label} deprecation removed",
                old_value=True,
                new_value=False,
            )
        ]
    return []


def spec_presence_changes(
    old_spec: Any,
    new_spec: Any,
    label: str,
    category: ChangeCategory,
) -> Optional[list[Change]]:
    """
    Handle comparisons where one or both specifications are absent.

    Returns:
        An empty list when both are absent, a single synthetic
        ADDED/INFO or REMOVED/BREAKING change when one side is absent,
        or None when both are present and a full comparison is needed.
    """
    if old_spec is None and new_spec is None:
        return []
    if old_spec is None:
        return [
            make_change(
                ChangeType.ADDED,
                category,
                Severity.INFO,
                SPEC_PATH,
                f"{label} specification created",
            )
        ]
    if new_spec is None:
        return [
            make_change(
                ChangeType.REMOVED,
                category,
                Severity.BREAKING,
                SPEC_PATH,
                f"{label} specification removed",
            )
        ]
    return None
