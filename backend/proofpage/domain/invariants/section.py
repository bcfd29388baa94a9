from proofpage.domain.exceptions import ValidationError
from proofpage.models.section import SECTION_TYPES


def assert_section_type(section_type):
    if section_type not in SECTION_TYPES:
        raise ValidationError("Invalid section type.")


def assert_section_accepts(section, item_type):
    """Items may only be attached to a section of the matching type."""
    if section.type != item_type:
        raise ValidationError(
            f"A {item_type.replace('_', ' ')} cannot be added to a {section.type.replace('_', ' ')} section."
        )
