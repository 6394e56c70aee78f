"""
Tests for naming helpers.
"""

import pytest

from modelkit.utils import camelize, capitalize, decapitalize, singularize, snakeize


class TestCaseConversion:

    @pytest.mark.parametrize("raw, expected", [
        ("first_name", "firstName"),
        ("login", "login"),
        ("user__id", "userId"),
        ("address_line_2", "addressLine2"),
    ])
    def test_camelize(self, raw, expected):
        assert camelize(raw) == expected

    def test_camelize_leading_underscore(self):
        assert camelize("_private_id", leading_underscore=True) == "_privateId"
        assert camelize("_private_id") == "PrivateId"

    @pytest.mark.parametrize("raw, expected", [
        ("firstName", "first_name"),
        ("BlogPost", "blog_post"),
        ("Accounts", "accounts"),
        ("HTTPServer", "http_server"),
        ("with_function", "with_function"),
    ])
    def test_snakeize(self, raw, expected):
        assert snakeize(raw) == expected

    def test_capitalize(self):
        assert capitalize("blogPost") == "BlogPost"
        assert decapitalize("BlogPost") == "blogPost"
        assert decapitalize("") == ""


class TestSingularize:

    @pytest.mark.parametrize("plural, singular", [
        ("Accounts", "Account"),
        ("Categories", "Category"),
        ("Addresses", "Address"),
        ("Boxes", "Box"),
        ("Matches", "Match"),
        ("People", "Person"),
        ("BlogPosts", "BlogPost"),
        ("Status", "Status"),
        ("Profile", "Profile"),
    ])
    def test_singularize(self, plural, singular):
        assert singularize(plural) == singular
