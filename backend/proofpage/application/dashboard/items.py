"""
Create / update / delete for the rows that live inside a section.

Each kind declares its model, the section type it belongs to, the form
fields it accepts (with the key used on "new item" forms) and which of
those are required.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Type

from proofpage.extensions import db
from proofpage.models.metric import Metric
from proofpage.models.testimonial import Testimonial
from proofpage.models.work_example import WorkExample
from proofpage.domain.exceptions import ValidationError
from proofpage.domain.invariants.section import assert_section_accepts
from proofpage.application.dashboard.ownership import get_owned_item, get_owned_section
from proofpage.utils.activity import log_action
from proofpage.utils.forms import optional_text, text
from proofpage.utils.media import save_upload
from proofpage.utils.toast import ActionResult
from proofpage.utils.transaction import transactional


@dataclass(frozen=True)
class ItemKind:
    name: str
    label: str
    model: Type[Any]
    section_type: str
    fields: Tuple[str, ...]
    optional_fields: Tuple[str, ...]
    required: Tuple[str, ...]
    media_column: Optional[str] = None
    thumb_column: Optional[str] = None

    def parse(self, data: Mapping[str, Any], *, prefix: str = "") -> dict:
        values = {}
        for field in self.fields:
            key = f"{prefix}{field}"
            if field in self.optional_fields:
                values[field] = optional_text(data, key)
            else:
                values[field] = text(data, key)

        missing = [field for field in self.required if not values[field]]
        if missing:
            names = " and ".join(field.replace("_", " ") for field in missing)
            raise ValidationError(f"{self.label} {names} {'is' if len(missing) == 1 else 'are'} required.")
        return values


TESTIMONIAL = ItemKind(
    name="testimonial",
    label="Testimonial",
    model=Testimonial,
    section_type="testimonial",
    fields=("name", "role_company", "quote"),
    optional_fields=("role_company",),
    required=("name", "quote"),
    media_column="avatar_path",
    thumb_column="avatar_thumb_path",
)

WORK_EXAMPLE = ItemKind(
    name="work_example",
    label="Work example",
    model=WorkExample,
    section_type="work_example",
    fields=("link_url", "description", "metric_text"),
    optional_fields=("link_url", "metric_text"),
    required=("description",),
    media_column="image_path",
    thumb_column="image_thumb_path",
)

METRIC = ItemKind(
    name="metric",
    label="Metric",
    model=Metric,
    section_type="metric",
    fields=("label", "value"),
    optional_fields=(),
    required=("label", "value"),
)

ITEM_KINDS = {kind.name: kind for kind in (TESTIMONIAL, WORK_EXAMPLE, METRIC)}


def create_item(*, kind: ItemKind, owner_id, section_id, data) -> ActionResult:
    section = get_owned_section(owner_id, section_id)
    assert_section_accepts(section, kind.section_type)

    # Metric forms post bare field names; the others use a `new_` prefix
    prefix = "new_" if any(f"new_{field}" in data for field in kind.fields) else ""
    values = kind.parse(data, prefix=prefix)

    item = kind.model()
    item.proof_section_id = section.id
    for field, value in values.items():
        setattr(item, field, value)

    with transactional():
        db.session.add(item)

    log_action(
        action=f"{kind.name}.create",
        entity_type=kind.name,
        entity_id=item.id,
        payload={"section_id": section.id},
    )
    return ActionResult.success(f"{kind.label} added.", id=item.id)


def update_item(*, kind: ItemKind, owner_id, item_id, data) -> ActionResult:
    item = get_owned_item(owner_id, kind.model, item_id, label=kind.label)
    values = kind.parse(data)

    changed_fields: list[str] = []

    with transactional():
        for field, value in values.items():
            if getattr(item, field) != value:
                setattr(item, field, value)
                changed_fields.append(field)

    if changed_fields:
        log_action(
            action=f"{kind.name}.update",
            entity_type=kind.name,
            entity_id=item_id,
            payload={"fields": changed_fields},
        )
    return ActionResult.success(f"{kind.label} saved.")


def delete_item(*, kind: ItemKind, owner_id, item_id) -> ActionResult:
    item = get_owned_item(owner_id, kind.model, item_id, label=kind.label)

    with transactional():
        db.session.delete(item)

    log_action(action=f"{kind.name}.delete", entity_type=kind.name, entity_id=item_id)
    return ActionResult.success(f"{kind.label} deleted.")


def upload_item_media(*, kind: ItemKind, owner_id, page, item_id, file, store) -> ActionResult:
    """
    Store an uploaded image for a testimonial avatar or work example.

    The derived thumbnail is cleared so the backfill job regenerates it
    from the new original.
    """
    if kind.media_column is None:
        raise ValidationError(f"{kind.label} does not take an image.")

    item = get_owned_item(owner_id, kind.model, item_id, label=kind.label)
    object_path = save_upload(store, file, user_id=owner_id, page_id=page.id)

    with transactional():
        setattr(item, kind.media_column, object_path)
        setattr(item, kind.thumb_column, None)

    log_action(
        action=f"{kind.name}.upload",
        entity_type=kind.name,
        entity_id=item_id,
        payload={"path": object_path},
    )

    if kind is TESTIMONIAL:
        return ActionResult.success("Avatar uploaded.", path=object_path)
    return ActionResult.success("Work image uploaded.", path=object_path)
