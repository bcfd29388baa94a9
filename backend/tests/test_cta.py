import pytest

from proofpage.domain.exceptions import ValidationError
from proofpage.utils.cta import normalize_cta_target, validate_cta_target


class TestNormalizeCtaTarget:
    @pytest.mark.parametrize("raw, expected", [
        ("alex@example.com", "mailto:alex@example.com"),
        ("https://alex.dev", "https://alex.dev"),
        ("HTTP://alex.dev", "HTTP://alex.dev"),
        ("mailto:alex@example.com", "mailto:alex@example.com"),
        ("tel:+15551234", "tel:+15551234"),
        ("alex.dev/contact", "https://alex.dev/contact"),
        ("  ", ""),
        (None, ""),
    ])
    def test_targets(self, raw, expected):
        assert normalize_cta_target(raw) == expected


class TestValidateCtaTarget:
    def test_rejects_spaces(self):
        with pytest.raises(ValidationError):
            validate_cta_target("my site")

    def test_rejects_host_without_domain(self):
        with pytest.raises(ValidationError):
            validate_cta_target("localhost")

    def test_blank_is_allowed(self):
        assert validate_cta_target("") == ""


class TestNormalizeIsStable:
    @pytest.mark.parametrize("raw", ["alex@example.com", "mailto:alex@example.com", "alex.dev", "tel:+15551234"])
    def test_normalizing_twice_changes_nothing(self, raw):
        once = normalize_cta_target(raw)
        assert normalize_cta_target(once) == once
