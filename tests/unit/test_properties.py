from __future__ import annotations

import json

import pytest

from jbouquet.domain.properties import Properties


def make_properties() -> Properties:
    return Properties({"db.host": "localhost", "db.port": "5432"})


def test_mapping_interface() -> None:
    props = make_properties()
    assert props["db.host"] == "localhost"
    assert "db.port" in props
    assert len(props) == 2
    assert list(props) == ["db.host", "db.port"]


def test_get_property_default() -> None:
    props = make_properties()
    assert props.get_property("db.port") == "5432"
    assert props.get_property("db.user") is None
    assert props.get_property("db.user", "admin") == "admin"


def test_immutable() -> None:
    props = make_properties()
    with pytest.raises(TypeError):
        props._data["db.host"] = "remote"  # type: ignore[index]


def test_source_mapping_is_copied() -> None:
    source = {"a": "1"}
    props = Properties(source)
    source["a"] = "2"
    assert props["a"] == "1"


def test_as_dict_returns_copy() -> None:
    props = make_properties()
    copy = props.as_dict()
    copy["db.host"] = "remote"
    assert props["db.host"] == "localhost"


def test_to_json() -> None:
    assert json.loads(make_properties().to_json())["db.port"] == "5432"


def test_equality_by_content() -> None:
    assert Properties({}) == Properties({})
    assert make_properties() == Properties({"db.host": "localhost", "db.port": "5432"})
