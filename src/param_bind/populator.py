"""Struct populator — fills a dataclass from a multi-valued string mapping.

Algorithm per field, in declared order::

    skip if not settable
    key = metadata[tag] or field name
    untagged RECORD field  → recurse with the same value source (flattening)
    key absent / no values → skip, field untouched
    custom hook            → wins over everything below
    SEQUENCE               → list of len(values), each slot coerced
    otherwise              → coerce values[0]

Only fields with a matching key are ever written.  An untagged nested record
that is ``None`` on entry is allocated and assigned back only if at least one
of its own fields was written.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, Tuple

from .casters import Coercer
from .errors import NotAStructError, SchemaCycleError
from .hooks import allocate, try_custom_decode
from .schema import FieldDescriptor, SchemaRegistry, Shape, is_record

logger = logging.getLogger(__name__)

ValueSource = Mapping[str, Sequence[str]]


class StructPopulator:
    """Bind a ``ValueSource`` onto dataclass instances.

    Args:
        coercer:   Scalar coercion engine.
        schemas:   Descriptor cache (shared between populators is fine).
        tag:       Field-metadata key holding the source-key annotation.
        max_depth: Maximum nesting of flattened records.
    """

    def __init__(
            self,
            *,
            coercer: Coercer | None = None,
            schemas: SchemaRegistry | None = None,
            tag: str = "form",
            max_depth: int = 32,
    ) -> None:
        self.coercer = coercer or Coercer()
        self.schemas = schemas or SchemaRegistry()
        self.tag = tag
        self.max_depth = max_depth

    def populate(self, dest: Any, values: ValueSource) -> None:
        """Write every field of *dest* that has a matching key in *values*."""
        if not is_record(dest):
            raise NotAStructError(dest)
        self._populate(dest, values, (type(dest),))

    # -- internals ----------------------------------------------------------

    def _populate(self, dest: Any, values: ValueSource, path: Tuple[type, ...]) -> int:
        written = 0
        for desc in self.schemas.describe(type(dest), self.tag):
            if not desc.settable:
                continue
            if not desc.tagged and desc.shape.shape is Shape.RECORD:
                written += self._flatten(dest, desc, values, path)
                continue

            inputs = values.get(desc.key)
            if not inputs:
                continue

            setattr(dest, desc.name, self._field_value(dest, desc, inputs))
            written += 1
        return written

    def _descend(self, path: Tuple[type, ...], nested_type: type) -> Tuple[type, ...]:
        nested_path = path + (nested_type,)
        if nested_type in path:
            raise SchemaCycleError(nested_path, "cyclic nested record")
        if len(nested_path) > self.max_depth:
            raise SchemaCycleError(nested_path, f"nested records exceed max depth {self.max_depth}")
        return nested_path

    def _flatten(self, dest: Any, desc: FieldDescriptor, values: ValueSource, path: Tuple[type, ...]) -> int:
        nested_type = desc.shape.tp
        nested_path = self._descend(path, nested_type)
        logger.debug("flattening %s.%s", type(dest).__name__, desc.name)

        nested = getattr(dest, desc.name, None)
        if nested is not None:
            return self._populate(nested, values, nested_path)

        # A None record is only allocated when one of its keys is present.
        if not self._has_input(nested_type, values, nested_path):
            return 0
        nested = allocate(nested_type)
        written = self._populate(nested, values, nested_path)
        logger.debug("allocated %s for %s.%s", nested_type.__name__, type(dest).__name__, desc.name)
        setattr(dest, desc.name, nested)
        return written

    def _has_input(self, cls: type, values: ValueSource, path: Tuple[type, ...]) -> bool:
        """True if populating a *cls* record from *values* would write anything."""
        for desc in self.schemas.describe(cls, self.tag):
            if not desc.settable:
                continue
            if not desc.tagged and desc.shape.shape is Shape.RECORD:
                if self._has_input(desc.shape.tp, values, self._descend(path, desc.shape.tp)):
                    return True
            elif values.get(desc.key):
                return True
        return False

    def _field_value(self, dest: Any, desc: FieldDescriptor, inputs: Sequence[str]) -> Any:
        current = getattr(dest, desc.name, None)
        applied, decoded = try_custom_decode(desc.shape, current, inputs[0])
        if applied:
            return decoded

        if desc.shape.shape is Shape.SEQUENCE:
            elem = desc.shape.elem
            return [self.coercer.coerce_value(elem, item) for item in inputs]

        return self.coercer.coerce_value(desc.shape, inputs[0], current)
