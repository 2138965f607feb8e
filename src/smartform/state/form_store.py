"""
In-memory ordered collection of the fields of the form being designed.

Order is the display and submission-column order. Every mutation bumps
`revision`, which lets slow readers (e.g. integration script generation)
detect that the form changed underneath them.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from smartform.errors import DuplicateFieldIdError, FieldNotFoundError
from smartform.schemas.form import FieldDefinition, FieldSpec, FieldUpdate, default_field, new_field_id


class FormStore:
    def __init__(self, fields: Optional[Iterable[FieldDefinition]] = None) -> None:
        self._fields: List[FieldDefinition] = []
        self._revision = 0
        for f in fields or []:
            self._append(f)

    @property
    def fields(self) -> Tuple[FieldDefinition, ...]:
        return tuple(self._fields)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def ids(self) -> List[str]:
        return [f.id for f in self._fields]

    def __len__(self) -> int:
        return len(self._fields)

    def _index(self, field_id: str) -> int:
        for i, f in enumerate(self._fields):
            if f.id == field_id:
                return i
        raise FieldNotFoundError(field_id)

    def _append(self, field: FieldDefinition) -> None:
        if any(f.id == field.id for f in self._fields):
            raise DuplicateFieldIdError(field.id)
        self._fields.append(field)

    def get(self, field_id: str) -> FieldDefinition:
        return self._fields[self._index(field_id)]

    def add(self, field: Optional[FieldDefinition] = None) -> FieldDefinition:
        """Append `field` (or a fresh default text field) at the end."""
        new = field if field is not None else default_field()
        self._append(new)
        self._revision += 1
        return new

    def remove(self, field_id: str) -> FieldDefinition:
        removed = self._fields.pop(self._index(field_id))
        self._revision += 1
        return removed

    def update(self, field_id: str, changes: Union[FieldUpdate, Mapping[str, Any]]) -> FieldDefinition:
        """
        Apply a partial edit in place. The id never changes; unset attributes are kept.
        """
        idx = self._index(field_id)
        if not isinstance(changes, FieldUpdate):
            changes = FieldUpdate.model_validate(dict(changes))
        patch = changes.model_dump(exclude_unset=True, exclude_none=True)
        current = self._fields[idx].model_dump()
        current.update(patch)
        current["id"] = field_id
        updated = FieldDefinition.model_validate(current)
        self._fields[idx] = updated
        self._revision += 1
        return updated

    def replace_all(self, specs: Iterable[FieldSpec]) -> Tuple[FieldDefinition, ...]:
        """
        Discard every current field and install `specs` in order, each with a fresh id.
        """
        self._fields = [FieldDefinition.from_spec(spec, field_id=new_field_id()) for spec in specs]
        self._revision += 1
        return self.fields
