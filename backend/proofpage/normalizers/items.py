from proofpage.utils.media import signed_media_url


def _timestamps(item, data, admin):
    if admin:
        data["created_at"] = item.created_at.isoformat() if item.created_at else None
        data["updated_at"] = item.updated_at.isoformat() if item.updated_at else None
    return data


def normalize_testimonial(testimonial, store, admin=False, image_size=None):
    data = {
        "id": testimonial.id,
        "name": testimonial.name,
        "role_company": testimonial.role_company,
        "quote": testimonial.quote,
        "avatar_url": signed_media_url(
            store, testimonial.avatar_thumb_path, testimonial.avatar_path, size=image_size
        ),
    }
    if admin:
        data["avatar_path"] = testimonial.avatar_path
    return _timestamps(testimonial, data, admin)


def normalize_work_example(work_example, store, admin=False, image_size=None):
    data = {
        "id": work_example.id,
        "link_url": work_example.link_url,
        "description": work_example.description,
        "metric_text": work_example.metric_text,
        "image_url": signed_media_url(
            store, work_example.image_thumb_path, work_example.image_path, size=image_size
        ),
    }
    if admin:
        data["image_path"] = work_example.image_path
    return _timestamps(work_example, data, admin)


def normalize_metric(metric, store=None, admin=False, image_size=None):
    data = {
        "id": metric.id,
        "label": metric.label,
        "value": metric.value,
    }
    return _timestamps(metric, data, admin)


ITEM_NORMALIZERS = {
    "testimonial": normalize_testimonial,
    "work_example": normalize_work_example,
    "metric": normalize_metric,
}


def normalize_item(section_type, item, store, admin=False, image_size=None):
    return ITEM_NORMALIZERS[section_type](item, store, admin=admin, image_size=image_size)
