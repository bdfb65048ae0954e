"""Unit tests for build_engine.validate.labels."""

from __future__ import annotations

import pytest

from build_engine.validate.labels import is_dns1123_subdomain, is_qualified_name, is_valid_label_value


class TestQualifiedName:
    @pytest.mark.parametrize(
        "value",
        ["simple", "my-scheduler", "kubernetes.io/hostname", "example.com/My_Name.1", "a" * 63],
    )
    def test_valid(self, value):
        assert is_qualified_name(value) == []

    def test_name_part_too_long(self):
        errs = is_qualified_name("a" * 64)
        assert errs == ["name part must be no more than 63 characters"]

    def test_empty(self):
        errs = is_qualified_name("")
        assert errs[0] == "name part must be non-empty"

    def test_empty_prefix(self):
        errs = is_qualified_name("/name")
        assert errs == ["prefix part must be non-empty"]

    def test_invalid_prefix(self):
        errs = is_qualified_name("Example.COM/name")
        assert len(errs) == 1
        assert errs[0].startswith("prefix part a lowercase RFC 1123 subdomain")

    def test_too_many_slashes(self):
        errs = is_qualified_name("a/b/c")
        assert len(errs) == 1
        assert errs[0].startswith("a qualified name must consist of alphanumeric characters")

    def test_bad_characters(self):
        errs = is_qualified_name("-leading-dash")
        assert len(errs) == 1
        assert "regex used for validation is" in errs[0]


class TestLabelValue:
    def test_empty_is_valid(self):
        assert is_valid_label_value("") == []

    def test_valid(self):
        assert is_valid_label_value("my_value-1.0") == []

    def test_too_long_and_invalid(self):
        errs = is_valid_label_value("-" * 64)
        assert errs[0] == "must be no more than 63 characters"
        assert errs[1].startswith("a valid label must be an empty string")


class TestDNS1123Subdomain:
    def test_valid(self):
        assert is_dns1123_subdomain("example.com") == []

    def test_uppercase_rejected(self):
        assert is_dns1123_subdomain("Example.com")

    def test_length_limit(self):
        errs = is_dns1123_subdomain("a" * 254)
        assert errs == ["must be no more than 253 characters"]
