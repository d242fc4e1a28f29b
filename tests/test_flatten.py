"""Tests for nested translation flattening."""

from __future__ import annotations

from transhub.utils.flatten import flatten_translations, lookup


def test_flatten_joins_nested_keys_with_dots():
    flat = flatten_translations({"features": {"visual_editor": "Editor", "deep": {"x": "y"}}})
    assert flat == {"features.visual_editor": "Editor", "features.deep.x": "y"}


def test_flatten_stringifies_scalars_like_json():
    flat = flatten_translations({"n": 3, "f": 1.5, "yes": True, "none": None})
    assert flat == {"n": "3", "f": "1.5", "yes": "true", "none": "null"}


def test_flatten_keeps_lists_as_leaves():
    flat = flatten_translations({"plural": ["one", "many"], "empty": {}})
    assert flat == {"plural": '["one","many"]'}


def test_every_flattened_key_resolves_to_its_leaf():
    document = {
        "nav": {"home": "Home", "menu": {"open": "Open", "close": "Close"}},
        "count": 2,
        "title": "Título",
    }
    flat = flatten_translations(document)

    def leaves(obj, prefix=""):
        for key, value in obj.items():
            path = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                yield from leaves(value, path)
            else:
                yield path, value

    for path, value in leaves(document):
        expected = value if isinstance(value, str) else str(value)
        assert lookup(flat, path) == expected


def test_lookup_handles_missing_data():
    assert lookup(None, "a") is None
    assert lookup({}, "a") is None
    assert lookup({"a.b": "c"}, "a") is None
