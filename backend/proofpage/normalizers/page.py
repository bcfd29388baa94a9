from .section import normalize_section

# Cover-cropped sizes requested for images on the public page
PUBLIC_IMAGE_SIZES = {
    "testimonial": (192, 192),
    "work_example": (640, 360),
}


def normalize_cta(page):
    return {
        "enabled": bool(page.cta_enabled),
        "label": page.cta_label or "Contact",
        "url": page.cta_url,
    }


def normalize_page(page, store, admin=False, image_sizes=None):
    sections = sorted(page.sections, key=lambda s: s.position)

    data = {
        "id": page.id,
        "title": page.title,
        "headline": page.headline,
        "bio": page.bio,
        "slug": page.slug,
        "status": page.status if admin else None,
        "theme": page.theme,
        "accent_color": page.accent_color,
        "cta": normalize_cta(page),
        "sections": [
            normalize_section(
                s,
                store,
                admin=admin,
                include_items=True,
                image_sizes=image_sizes,
            )
            for s in sections
        ]
    }

    if admin:
        data["updated_at"] = page.updated_at.isoformat() if page.updated_at else None

    return data
