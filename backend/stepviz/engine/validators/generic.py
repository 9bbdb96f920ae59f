"""Validators for the structurally simpler canonical types.

Each type names a root collection (and the aliases producers use for it).
A missing root collection makes the payload invalid and substitutes the
type's fallback instance; anything else is advisory.
"""

from __future__ import annotations

from typing import Any, ClassVar

from stepviz.engine.registry import validator
from stepviz.engine.types import CanonicalType
from stepviz.engine.validators.array import ArrayValidator
from stepviz.engine.validators.base import BaseValidator, ValidationResult, has_id, is_number


class CollectionValidator(BaseValidator):
    """Locates the root collection, copies the known optional fields, then runs ``check``."""

    root_field: ClassVar[str]
    root_aliases: ClassVar[tuple[str, ...]] = ()
    root_kind: ClassVar[type] = list
    optional_fields: ClassVar[tuple[str, ...]] = ()

    def _validate(self, data: Any) -> ValidationResult:
        if not isinstance(data, dict):
            self.add_error(f"must be an object but was {type(data).__name__}", "data")
            return self.fallback_result()

        root = None
        for key in (self.root_field, *self.root_aliases):
            if data.get(key) is not None:
                root = data[key]
                break

        if not self.exists(root, self.root_field):
            return self.fallback_result()
        if not isinstance(root, self.root_kind):
            kind = "a list" if self.root_kind is list else "an object"
            self.add_error(f"must be {kind} but was {type(root).__name__}", self.root_field)
            return self.fallback_result()

        sanitized: dict[str, Any] = {self.root_field: root}
        for key in self.optional_fields:
            if key in data:
                sanitized[key] = data[key]
        self.check(sanitized)
        if self.root_kind is list and root and not sanitized[self.root_field]:
            return self.fallback_result()
        return self.result(sanitized)

    def check(self, sanitized: dict[str, Any]) -> None:
        pass


@validator(CanonicalType.HASHMAP, description="Key/value map")
class HashMapValidator(CollectionValidator):
    root_field = "hashMap"
    root_aliases = ("map", "dictionary")
    root_kind = dict
    optional_fields = ("highlights", "operations", "statistics", "keys", "values")

    def check(self, sanitized: dict[str, Any]) -> None:
        if not sanitized["hashMap"]:
            self.add_edge_case("Empty hash map - ensure lookups on missing keys are handled")
        highlights = sanitized.get("highlights")
        if isinstance(highlights, dict) and isinstance(highlights.get("keys"), list):
            keys = {str(k) for k in sanitized["hashMap"]}
            for key in highlights["keys"]:
                if str(key) not in keys:
                    self.add_warning(f"Highlighted key {key!r} is not in the map", "highlights.keys")


@validator(CanonicalType.LINKEDLIST, description="Linked nodes with next pointers")
class LinkedListValidator(CollectionValidator):
    root_field = "nodes"
    optional_fields = ("head", "tail", "operations", "type", "traversal")

    def check(self, sanitized: dict[str, Any]) -> None:
        nodes = sanitized["nodes"]
        if not nodes:
            self.add_edge_case("Empty linked list - ensure head is None is handled")
            return

        ids: dict[Any, dict[str, Any]] = {}
        for i, node in enumerate(nodes):
            if not isinstance(node, dict):
                self.add_error("must be an object", f"nodes[{i}]")
                continue
            if self.exists(node.get("id"), f"nodes[{i}].id"):
                ids[node["id"]] = node

        for i, node in enumerate(nodes):
            if not isinstance(node, dict):
                continue
            nxt = node.get("next")
            if nxt is not None and nxt not in ids:
                self.add_error(f"References non-existent node: {nxt}", f"nodes[{i}].next")

        head = sanitized.get("head")
        if head is not None and head not in ids:
            self.add_error(f"References non-existent node: {head}", "head")

        if len(ids) == 1:
            self.add_edge_case("Single node linked list - check head and tail updates")

        start = head if head in ids else next(iter(ids), None)
        seen: set[Any] = set()
        while start is not None and start in ids:
            if start in seen:
                self.add_edge_case("Cycle detected in linked list")
                self.add_pitfall("Traversal without a visited check will loop forever on a cyclic list")
                break
            seen.add(start)
            start = ids[start].get("next")

        sanitized["nodes"] = [n for n in nodes if has_id(n)]


@validator(CanonicalType.RECURSION, description="Call stack frames")
class RecursionValidator(CollectionValidator):
    root_field = "callStack"
    optional_fields = ("recursiveTree", "currentCall", "baseCase")

    def check(self, sanitized: dict[str, Any]) -> None:
        stack = sanitized["callStack"]
        if not stack:
            self.add_edge_case("Empty call stack - recursion has fully unwound")
        for i, frame in enumerate(stack):
            if not isinstance(frame, dict):
                self.add_warning("frame should be an object", f"callStack[{i}]")
        if len(stack) > self.config.deep_recursion_threshold:
            self.add_pitfall(
                f"Deep recursion ({len(stack)} frames) - risk of stack overflow, consider memoization or iteration"
            )
        if sanitized.get("baseCase"):
            self.add_edge_case("Base case reached")


class _ElementsValidator(CollectionValidator):
    root_field = "elements"
    optional_fields = ("top", "front", "rear", "operations", "capacity", "size", "priority", "overflow", "underflow")
    noun: ClassVar[str] = "container"

    def check(self, sanitized: dict[str, Any]) -> None:
        elements = sanitized["elements"]
        if not elements:
            self.add_edge_case(f"Empty {self.noun} - ensure {self.noun} underflow is handled")
        capacity = sanitized.get("capacity")
        if is_number(capacity) and len(elements) > capacity:
            self.add_error(f"{len(elements)} elements exceed capacity {capacity}", "elements")
        if sanitized.get("overflow"):
            self.add_pitfall(f"{self.noun.capitalize()} overflow - check capacity before pushing")
        if sanitized.get("underflow"):
            self.add_pitfall(f"{self.noun.capitalize()} underflow - check emptiness before popping")
        for marker in ("top", "front", "rear"):
            position = sanitized.get(marker)
            if is_number(position) and elements and not 0 <= position < len(elements):
                self.add_warning(f"Position {position} out of bounds (max: {len(elements) - 1})", marker)


@validator(CanonicalType.STACK, description="Stack elements")
class StackValidator(_ElementsValidator):
    noun = "stack"


@validator(CanonicalType.QUEUE, description="Queue elements")
class QueueValidator(_ElementsValidator):
    noun = "queue"


@validator(CanonicalType.RESULTS, description="Final results summary")
class ResultsValidator(CollectionValidator):
    root_field = "results"
    root_kind = object
    optional_fields = ("supportingData", "statistics")

    def check(self, sanitized: dict[str, Any]) -> None:
        if isinstance(sanitized["results"], (dict, list)) and not sanitized["results"]:
            self.add_edge_case("Empty results - algorithm produced no output")


@validator(CanonicalType.HYBRID, description="Multiple co-visualized structures")
class HybridValidator(BaseValidator):
    """No required collection; keeps every field and checks the typed ones it knows."""

    def _validate(self, data: Any) -> ValidationResult:
        if not isinstance(data, dict):
            self.add_error(f"must be an object but was {type(data).__name__}", "data")
            return self.fallback_result()

        sanitized = dict(data)
        expected = {"arrays": list, "string": str, "hashMap": dict, "pointers": list, "operations": list}
        for key, kind in expected.items():
            value = sanitized.get(key)
            if value is not None and not isinstance(value, kind):
                self.add_warning(f"expected {kind.__name__} but got {type(value).__name__}", key)
                value = None
            sanitized[key] = kind() if value is None else value
        self._check_arrays(sanitized)
        return self.result(sanitized)

    def _check_arrays(self, sanitized: dict[str, Any]) -> None:
        """Bounds checks of the array part. Pointers are checked only when no string shares them."""
        checker = ArrayValidator(self.config)
        for i, array_data in enumerate(sanitized["arrays"]):
            checker.validate_single_array(array_data, f"arrays[{i}]")
        usable = [a for a in sanitized["arrays"] if isinstance(a, dict) and isinstance(a.get("values"), list)]
        if usable and not sanitized["string"] and sanitized["pointers"]:
            checker.validate_pointers(sanitized["pointers"], usable)
        self.errors.extend(checker.errors)
        self.warnings.extend(checker.warnings)
        sanitized["arrays"] = usable
