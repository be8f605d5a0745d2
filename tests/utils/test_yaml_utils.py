from __future__ import annotations

import pytest

from nestspec.utils.yaml_utils import load_yaml_mapping, normalize_yaml_dict_keys


def test_normalize_converts_boolean_and_numeric_keys() -> None:
    assert normalize_yaml_dict_keys({True: 1, False: 2, 3: 4, "k": 5}) == {
        "True": 1,
        "False": 2,
        "3": 4,
        "k": 5,
    }


def test_load_yaml_mapping_normalizes_keys() -> None:
    assert load_yaml_mapping("yes: 1\nname: x\n") == {"True": 1, "name": "x"}


def test_load_yaml_mapping_empty_document() -> None:
    assert load_yaml_mapping("") == {}
    assert load_yaml_mapping("# only a comment\n") == {}


def test_load_yaml_mapping_rejects_scalars_and_lists() -> None:
    with pytest.raises(ValueError):
        load_yaml_mapping("just text")
    with pytest.raises(ValueError):
        load_yaml_mapping("[1, 2]")
