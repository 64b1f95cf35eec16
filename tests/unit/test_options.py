from __future__ import annotations

import pytest

from templatevisitor.options import (
    DEFAULT_EDITION,
    LATEST_EDITION,
    ParserOptions,
    SourceType,
    normalize_edition,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (2015, 2015),
        (2018, 2018),
        (6, 2015),
        (9, 2018),
        (11, 2020),
        ("2020", 2020),
        ("latest", LATEST_EDITION),
        ("LATEST", LATEST_EDITION),
    ],
)
def test_normalize_edition(value, expected):
    assert normalize_edition(value) == expected


@pytest.mark.parametrize("value", [2014, 5, 3000, "es6"])
def test_normalize_edition_rejects_unknown_values(value):
    with pytest.raises(ValueError):
        normalize_edition(value)


@pytest.mark.parametrize("value", [True, 2018.0, None])
def test_normalize_edition_rejects_wrong_types(value):
    with pytest.raises(TypeError):
        normalize_edition(value)


def test_defaults():
    options = ParserOptions()
    assert options.ecma_version == DEFAULT_EDITION
    assert options.source_type is SourceType.SCRIPT
    assert not options.is_module


def test_from_mapping_accepts_both_spellings():
    a = ParserOptions.from_mapping({"ecmaVersion": 2020, "sourceType": "module"})
    b = ParserOptions.from_mapping({"ecma_version": 11, "source_type": SourceType.MODULE})
    assert a == b
    assert a.is_module
    assert ParserOptions.from_mapping(None) == ParserOptions()


def test_unknown_keys_raise():
    with pytest.raises(KeyError):
        ParserOptions.from_mapping({"ecmaFeatures": {}})
    with pytest.raises(KeyError):
        ParserOptions().evolve(jsx=True)


def test_evolve_normalizes():
    options = ParserOptions().evolve(ecma_version="latest", source_type="module")
    assert options.ecma_version == LATEST_EDITION
    assert options.source_type is SourceType.MODULE


def test_bad_source_type():
    with pytest.raises(ValueError):
        ParserOptions(source_type="commonjs")  # type: ignore[arg-type]
