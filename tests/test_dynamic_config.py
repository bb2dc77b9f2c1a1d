import json
import logging
import threading

import pytest

from dynamic_config import DynamicProperty, MapConfigSource, join_namespace


class TestJoinNamespace:

    @pytest.mark.parametrize("parent,sub,expected", [
        (None, "transport", "transport."),
        (None, "transport.", "transport."),
        ("eureka", "transport", "eureka.transport."),
        ("eureka.", "transport", "eureka.transport."),
        ("", "transport", ".transport."),
    ])
    def test_join(self, parent, sub, expected):
        assert join_namespace(parent, sub) == expected


class TestDynamicProperty:

    def test_handle_reads_current_value(self):
        source = MapConfigSource()
        prop = source.get_int_property("a.b", 7)
        assert isinstance(prop, DynamicProperty)
        assert prop.key == "a.b"
        assert prop.get() == 7
        source.set_property("a.b", 9)
        assert prop.get() == 9

    @pytest.mark.parametrize("raw,expected", [
        (True, True), ("true", True), ("YES", True), ("on", True), ("1", True),
        (False, False), ("false", False), ("no", False), ("off", False), (0, False),
    ])
    def test_boolean_conversion(self, raw, expected):
        source = MapConfigSource({"flag": raw})
        assert source.get_boolean_property("flag", None).get() is expected

    def test_int_rejects_bool_and_fractions(self, caplog):
        source = MapConfigSource({"bool": True, "fraction": 1.5, "whole": 3.0})
        with caplog.at_level(logging.WARNING, logger="dynamic_config"):
            assert source.get_int_property("bool", 1).get() == 1
            assert source.get_int_property("fraction", 2).get() == 2
        assert source.get_int_property("whole", 0).get() == 3
        assert len(caplog.records) == 2

    def test_float_and_double(self):
        source = MapConfigSource({"ratio": "0.25", "count": 3})
        assert source.get_float_property("ratio", 0.0).get() == 0.25
        assert source.get_double_property("count", 0.0).get() == 3.0

    def test_string_conversion(self):
        source = MapConfigSource({"port": 8080})
        assert source.get_string_property("port", None).get() == "8080"
        assert source.get_string_property("missing", None).get() is None


class TestMapConfigSource:

    def test_keys_with_prefix(self):
        source = MapConfigSource({"eureka.metadata.zone": "a", "eureka.port": 80, "other": 1})
        assert sorted(source.keys("eureka.")) == ["eureka.metadata.zone", "eureka.port"]
        assert "other" in source
        assert sorted(source) == ["eureka.metadata.zone", "eureka.port", "other"]

    def test_update(self):
        source = MapConfigSource({"a": 1})
        source.update({"a": 2, "b": 3})
        assert source.get_raw("a") == 2
        assert source.get_raw("b") == 3

    def test_from_json_file_flattens(self, tmp_path):
        path = tmp_path / "eureka.json"
        path.write_text(json.dumps({
            "eureka": {
                "port": 8080,
                "transport": {"readClusterVip": "eureka-read"},
            },
        }))
        source = MapConfigSource.from_json_file(str(path))
        assert source.get_raw("eureka.port") == 8080
        assert source.get_raw("eureka.transport.readClusterVip") == "eureka-read"

    def test_from_json_file_warns_on_duplicate_keys(self, tmp_path, caplog):
        path = tmp_path / "dup.json"
        path.write_text(json.dumps({"eureka.port": 80, "eureka": {"port": 81}}))
        with caplog.at_level(logging.WARNING, logger="dynamic_config"):
            source = MapConfigSource.from_json_file(str(path))
        assert source.get_raw("eureka.port") == 81
        assert "eureka.port" in caplog.text

    def test_from_json_file_dotted_pairs(self, tmp_path):
        path = tmp_path / "ports.json"
        path.write_text(json.dumps({"eureka": {"port": 8080, "port.enabled": False}}))
        source = MapConfigSource.from_json_file(str(path))
        assert source.get_raw("eureka.port") == 8080
        assert source.get_raw("eureka.port.enabled") is False

    def test_from_json_file_missing(self, tmp_path, caplog):
        with pytest.raises(FileNotFoundError):
            MapConfigSource.from_json_file(str(tmp_path / "missing.json"))
        assert "nicht gefunden" in caplog.text

    def test_from_json_file_invalid(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            MapConfigSource.from_json_file(str(path))

    def test_from_json_file_requires_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            MapConfigSource.from_json_file(str(path))

    def test_concurrent_writers(self):
        source = MapConfigSource()

        def writer(n):
            for i in range(200):
                source.set_property(f"key.{n}.{i}", i)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(source.keys("key.")) == 800
