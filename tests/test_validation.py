import pytest

from todo_api.errors import ValidationError
from todo_api.validation import validate_create, validate_update


def rejection_code(fn, *args):
    with pytest.raises(ValidationError) as info:
        fn(*args)
    return info.value.code


class TestValidateCreate:
    def test_trims_text_and_defaults_completed(self):
        data = validate_create({"text": "  buy milk  "})
        assert data.text == "buy milk"
        assert data.completed is False

    def test_completed_is_coerced_by_truthiness(self):
        assert validate_create({"text": "a", "completed": "yes"}).completed is True
        assert validate_create({"text": "a", "completed": 0}).completed is False
        assert validate_create({"text": "a", "completed": None}).completed is False

    @pytest.mark.parametrize(
        "payload, code",
        [
            ({}, "MissingField"),
            ({"text": None}, "MissingField"),
            ({"text": ""}, "MissingField"),
            ({"text": 12}, "TypeError"),
            ({"text": ["a"]}, "TypeError"),
            ({"text": " \t\n "}, "EmptyText"),
            ({"text": "z" * 201}, "TooLong"),
        ],
    )
    def test_rejections(self, payload, code):
        assert rejection_code(validate_create, payload) == code

    def test_length_is_checked_before_trimming(self):
        # 198 visible characters padded to 202
        assert rejection_code(validate_create, {"text": "  " + "a" * 198 + "  "}) == "TooLong"

    def test_blank_check_wins_over_length(self):
        assert rejection_code(validate_create, {"text": " " * 300}) == "EmptyText"

    def test_body_must_be_an_object(self):
        assert rejection_code(validate_create, "text") == "InvalidBody"
        assert rejection_code(validate_create, None) == "MissingField"


class TestValidateUpdate:
    def test_requires_id(self):
        assert rejection_code(validate_update, "", {"completed": True}) == "MissingId"
        assert rejection_code(validate_update, None, {"completed": True}) == "MissingId"

    def test_only_supplied_fields_are_carried(self):
        data = validate_update("abc", {"completed": True})
        assert data.changes() == {"completed": True}

        data = validate_update("abc", {"text": "  buy eggs "})
        assert data.changes() == {"text": "buy eggs"}

    def test_unknown_keys_are_ignored(self):
        data = validate_update("abc", {"id": "other", "createdAt": "x", "completed": 1})
        assert data.changes() == {"completed": True}

    def test_empty_update_is_allowed(self):
        assert validate_update("abc", {}).changes() == {}
        assert validate_update("abc", None).changes() == {}

    def test_null_completed_becomes_false(self):
        assert validate_update("abc", {"completed": None}).changes() == {"completed": False}

    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"text": None}, "TypeError"),
            ({"text": 3}, "TypeError"),
            ({"text": ""}, "EmptyText"),
            ({"text": "   "}, "EmptyText"),
            ({"text": "q" * 201}, "TooLong"),
        ],
    )
    def test_text_rejections(self, payload, code):
        assert rejection_code(validate_update, "abc", payload) == code
