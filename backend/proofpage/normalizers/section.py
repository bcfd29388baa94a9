from .items import normalize_item


def normalize_section(section, store, admin=False, include_items=False, image_sizes=None):
    data = {
        "id": section.id,
        "type": section.type,
        "position": section.position,
    }

    if include_items:
        size = (image_sizes or {}).get(section.type)
        data["items"] = [
            normalize_item(section.type, item, store, admin=admin, image_size=size)
            for item in section.items
        ]

    return data
