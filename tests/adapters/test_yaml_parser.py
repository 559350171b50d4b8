from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytest

from jbouquet.adapters.decoders.yaml_parser import (
    YamlMapDecoder,
    parse_all,
    parse_file,
    parse_file_all,
    parse_map,
    parse_one,
    parse_resource_all,
)
from jbouquet.adapters.resources.default import DefaultResourceLocator
from jbouquet.domain.errors import NotFound, ParseError


@dataclass
class Endpoint:
    host: str
    port: int = 80


@dataclass
class Service:
    name: str
    endpoints: list[Endpoint] = field(default_factory=list)
    primary: Optional[Endpoint] = None
    labels: dict[str, str] = field(default_factory=dict)
    retry_count: int = 0


class Settings:
    def __init__(self, smtp_host: str, smtp_port: int = 25) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port


SERVICE_YAML = """\
name: billing
retry-count: 3
primary:
  host: db.internal
  port: 5432
endpoints:
  - host: a.internal
  - host: b.internal
    port: 8080
labels:
  team: payments
"""


def test_binds_nested_dataclasses() -> None:
    service = parse_one(Service, SERVICE_YAML)
    assert service.name == "billing"
    assert service.retry_count == 3
    assert service.primary == Endpoint("db.internal", 5432)
    assert service.endpoints == [Endpoint("a.internal"), Endpoint("b.internal", 8080)]
    assert service.labels == {"team": "payments"}


def test_binds_plain_class_by_keyword() -> None:
    settings = parse_one(Settings, "smtp-host: mx\nsmtp-port: 2525\n")
    assert (settings.smtp_host, settings.smtp_port) == ("mx", 2525)


def test_unknown_field_raises() -> None:
    with pytest.raises(ParseError):
        parse_one(Endpoint, "host: a\ncolour: blue\n")
    with pytest.raises(ParseError):
        parse_one(Settings, "smtp-host: mx\nsmtp-colour: blue\n")


def test_missing_required_field_raises() -> None:
    with pytest.raises(ParseError):
        parse_one(Endpoint, "port: 1\n")


def test_scalar_document_cannot_bind_to_class() -> None:
    with pytest.raises(ParseError):
        parse_one(Endpoint, "just a string\n")


def test_multi_document_stream_in_order() -> None:
    text = "host: a\n---\nhost: b\nport: 2\n---\nhost: c\n"
    assert parse_all(Endpoint, text) == [Endpoint("a"), Endpoint("b", 2), Endpoint("c")]


def test_parse_one_ignores_later_documents() -> None:
    text = "host: a\n---\nhost: [unclosed\n"
    assert parse_one(Endpoint, text) == Endpoint("a")
    with pytest.raises(ParseError):
        parse_all(Endpoint, text)


def test_empty_text() -> None:
    assert parse_one(Endpoint, "") is None
    assert parse_all(Endpoint, "") == []
    assert parse_map("") == {}


def test_malformed_yaml_raises() -> None:
    with pytest.raises(ParseError):
        parse_map("key: [unclosed\n")


def test_map_stringifies_values() -> None:
    text = "port: 8080\ndebug: false\nempty:\nratio: 0.5\nname: demo\n"
    assert parse_map(text) == {"port": "8080", "debug": "false", "empty": "", "ratio": "0.5", "name": "demo"}


def test_map_renders_nested_collections_as_flow_yaml() -> None:
    mapping = parse_map("hosts:\n  - a\n  - b\ndb:\n  user: app\n")
    assert mapping["hosts"] == "[a, b]"
    assert mapping["db"] == "{user: app}"


def test_map_preserves_key_order() -> None:
    assert list(parse_map("z: 1\na: 2\nm: 3\n")) == ["z", "a", "m"]


def test_map_rejects_non_mapping_root() -> None:
    with pytest.raises(ParseError):
        parse_map("- a\n- b\n")


def test_decoder_names_the_source() -> None:
    with pytest.raises(ParseError, match="app.yaml"):
        YamlMapDecoder().decode("- a\n", source="app.yaml")


def test_parse_file(tmp_path: Path) -> None:
    path = tmp_path / "service.yaml"
    path.write_text("host: a\n---\nhost: b\n", encoding="utf-8")
    assert parse_file(Endpoint, path) == Endpoint("a")
    assert parse_file_all(Endpoint, str(path)) == [Endpoint("a"), Endpoint("b")]


def test_parse_file_missing(tmp_path: Path) -> None:
    with pytest.raises(NotFound):
        parse_file(Endpoint, tmp_path / "absent.yaml")


def test_parse_resource_all(tmp_path: Path) -> None:
    (tmp_path / "endpoints.yaml").write_text("host: a\n---\nhost: b\n", encoding="utf-8")
    locator = DefaultResourceLocator(roots=[tmp_path])
    assert parse_resource_all(Endpoint, "classpath:endpoints.yaml", locator) == [Endpoint("a"), Endpoint("b")]
    with pytest.raises(NotFound, match="does not exist"):
        parse_resource_all(Endpoint, "classpath:absent.yaml", locator)
