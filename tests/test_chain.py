"""Tests for the per-subtype service chain."""

import pytest

from extraction_bridge.bridge import ServiceChain
from extraction_bridge.mapping import MappingLoader
from extraction_bridge.services import SERVICE_TYPE

from conftest import StubFile, StubService, write_mapping


@pytest.fixture
def chain(registry, mapping_dir):
    return ServiceChain(registry, MappingLoader([mapping_dir]))


def test_each_service_visited_once_without_mappings(registry, chain):
    for key in ("a", "b", "c"):
        registry.add(key, ["jpg"], output={"title": key})

    assert chain.run(StubFile("jpg"), "jpg") == {}
    assert sorted(registry.instances) == ["a", "b", "c"]


def test_no_service_for_subtype(chain):
    assert chain.run(StubFile("jpg"), "jpg") == {}


def test_higher_priority_wins_conflicts(registry, chain, mapping_dir):
    registry.add("low", ["jpg"], output={"t": "low", "only_low": 1}, priority=10)
    registry.add("high", ["jpg"], output={"t": "high"}, priority=90)
    for key in ("low", "high"):
        write_mapping(mapping_dir, key, "default", [{"FAL": "title", "DATA": "t"}, {"FAL": "extra", "DATA": "only_low"}])

    result = chain.run(StubFile("jpg"), "jpg")

    assert result == {"title": "high", "extra": 1}
    assert registry.instances == ["high", "low"]


def test_service_without_mapping_is_not_run(registry, chain, mapping_dir):
    calls = []
    registry.add("mapped", ["jpg"], output={"t": "x"}, calls=calls)
    registry.add("unmapped", ["jpg"], output={"t": "y"}, calls=calls)
    write_mapping(mapping_dir, "mapped", "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"title": "x"}
    assert calls == ["mapped"]


def test_failing_service_is_skipped(registry, chain, mapping_dir):
    registry.add("broken", ["jpg"], priority=90, fail=True)
    registry.add("working", ["jpg"], output={"t": "ok"}, priority=10)
    for key in ("broken", "working"):
        write_mapping(mapping_dir, key, "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"title": "ok"}


def test_service_without_output_is_skipped(registry, chain, mapping_dir):
    registry.add("empty", ["jpg"], output=None, priority=90)
    registry.add("working", ["jpg"], output={"t": "ok"}, priority=10)
    for key in ("empty", "working"):
        write_mapping(mapping_dir, key, "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"title": "ok"}


def test_unavailable_local_file_degrades_to_empty(registry, chain, mapping_dir):
    registry.add("svc", ["jpg"], output={"t": "x"})
    write_mapping(mapping_dir, "svc", "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg", missing=True), "jpg") == {}


def test_service_receives_read_only_path_and_extension(registry, chain, mapping_dir):
    seen = {}

    class RecordingService(StubService):
        def _extract(self, file_path):
            seen["path"] = file_path
            seen["type"] = self.input_type
            return {"t": "x"}

    registry.register(SERVICE_TYPE, "rec", lambda: RecordingService("rec"), ["jpg"])
    write_mapping(mapping_dir, "rec", "default", [{"FAL": "title", "DATA": "t"}])

    chain.run(StubFile("jpg", path="/data/photo"), "jpg")

    assert seen == {"path": "/data/photo.jpg", "type": "jpg"}


def test_subtype_mapping_used_for_subtype(registry, chain, mapping_dir):
    registry.add("svc", ["jpg", "image:exif"], output={"a": "A", "b": "B"})
    write_mapping(mapping_dir, "svc", "default", [{"FAL": "x", "DATA": "a"}])
    write_mapping(mapping_dir, "svc", "image_exif", [{"FAL": "x", "DATA": "b"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"x": "A"}
    assert chain.run(StubFile("jpg"), "image:exif") == {"x": "B"}


def test_repeated_service_key_stops_chain(mapping_dir):
    class LoopingRegistry:
        def __init__(self):
            self.lookups = 0

        def find_service(self, service_type, subtype, exclude=()):
            self.lookups += 1
            return StubService("same", output={"t": "x"})

    registry = LoopingRegistry()
    write_mapping(mapping_dir, "same", "default", [{"FAL": "title", "DATA": "t"}])

    result = ServiceChain(registry, MappingLoader([mapping_dir])).run(StubFile("jpg"), "jpg")

    assert result == {"title": "x"}
    assert registry.lookups == 2


def test_registration_key_used_for_chain(registry, chain, mapping_dir):
    # Factory hands out an instance whose own key differs from the registration
    registry.register(SERVICE_TYPE, "alias", lambda: StubService("real", output={"a": "A"}), ["jpg"], priority=90)
    registry.add("good", ["jpg"], output={"t": "x"}, priority=10)
    write_mapping(mapping_dir, "alias", "default", [{"FAL": "a", "DATA": "a"}])
    write_mapping(mapping_dir, "good", "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"a": "A", "title": "x"}


def test_service_without_key_is_keyed_by_registration(registry, chain, mapping_dir):
    class UnkeyedService(StubService):
        key = ""

    registry.register(SERVICE_TYPE, "unkeyed", lambda: UnkeyedService("", output={"a": "A"}), ["jpg"], priority=90)
    registry.add("good", ["jpg"], output={"t": "x"}, priority=10)
    write_mapping(mapping_dir, "unkeyed", "default", [{"FAL": "a", "DATA": "a"}])
    write_mapping(mapping_dir, "good", "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"a": "A", "title": "x"}


def test_factory_without_instance_is_skipped(registry, chain, mapping_dir):
    registry.register(SERVICE_TYPE, "nothing", lambda: None, ["jpg"], priority=90)
    registry.add("good", ["jpg"], output={"t": "x"}, priority=10)
    write_mapping(mapping_dir, "nothing", "default", [{"FAL": "a", "DATA": "a"}])
    write_mapping(mapping_dir, "good", "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"title": "x"}


def test_non_decimal_digit_segment_is_absent(registry, chain, mapping_dir):
    registry.add("svc", ["jpg"], output={"streams": [{"w": 1}]})
    write_mapping(
        mapping_dir,
        "svc",
        "default",
        [{"FAL": "width", "DATA": "streams|²|w"}, {"FAL": "ok", "DATA": "static:y"}],
    )

    assert chain.run(StubFile("jpg"), "jpg") == {"ok": "y"}


def test_remap_failure_drops_only_that_service(registry, chain, mapping_dir, monkeypatch):
    from extraction_bridge import bridge

    real_remap = bridge.remap_output

    def remap_output(output, mapping):
        if "boom" in output:
            raise RuntimeError("remap failed")
        return real_remap(output, mapping)

    monkeypatch.setattr(bridge, "remap_output", remap_output)
    registry.add("broken", ["jpg"], output={"boom": 1}, priority=90)
    registry.add("good", ["jpg"], output={"t": "x"}, priority=10)
    for key in ("broken", "good"):
        write_mapping(mapping_dir, key, "default", [{"FAL": "title", "DATA": "t"}])

    assert chain.run(StubFile("jpg"), "jpg") == {"title": "x"}
