from stencil.core.utils.merge import deep_merge, merge_arrays


def test_deep_merge_nested_dicts() -> None:
    base = {"a": 1, "b": {"c": 2, "d": {"e": 3}}}
    override = {"b": {"d": {"f": 4}}, "g": 5}
    assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": {"e": 3, "f": 4}}, "g": 5}


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"b": {"c": 2}}
    override = {"b": {"c": 3}}
    deep_merge(base, override)
    assert base == {"b": {"c": 2}}
    assert override == {"b": {"c": 3}}


def test_scalar_replaces_dict() -> None:
    assert deep_merge({"a": {"b": 1}}, {"a": None}) == {"a": None}


def test_lists_replace_unless_prefixed_with_plus() -> None:
    assert merge_arrays([1, 2], [3]) == [3]
    assert merge_arrays([1, 2], ["+", 3]) == [1, 2, 3]
    assert deep_merge({"x": [1]}, {"x": ["+", 2]}) == {"x": [1, 2]}
    assert merge_arrays([1, 2], []) == []
