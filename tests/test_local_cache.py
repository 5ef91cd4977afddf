"""
Tests for the file-backed local cache.
"""
from services.local_cache import LocalCache


def test_put_get_and_remove(tmp_path):
    cache = LocalCache(tmp_path)
    cache.put("units", {"id": "u1", "unit_number": "A1"})
    cache.put_many("units", [{"id": "u2", "unit_number": "A2"}, {"id": "u1", "unit_number": "A1b"}])

    assert cache.get("units", "u1") == {"id": "u1", "unit_number": "A1b"}
    assert len(cache.all("units")) == 2
    assert cache.get("tenants", "u1") is None

    cache.remove("units", "u1")
    cache.remove("units", "never-there")
    assert [d["id"] for d in cache.all("units")] == ["u2"]


def test_documents_survive_a_new_instance(tmp_path):
    LocalCache(tmp_path).put("properties", {"id": "p1", "name": "Sunrise"})
    assert LocalCache(tmp_path).get("properties", "p1")["name"] == "Sunrise"
    assert (tmp_path / "bottaye_properties.json").exists()


def test_apply_writes_and_removes(tmp_path):
    cache = LocalCache(tmp_path, prefix="test_")
    cache.put("units", {"id": "gone"})

    cache.apply({
        ("units", "u1"): {"id": "u1"},
        ("units", "gone"): None,
        ("tenants", "t1"): {"id": "t1", "name": "Jane"},
    })

    assert [d["id"] for d in cache.all("units")] == ["u1"]
    assert cache.get("tenants", "t1")["name"] == "Jane"
    assert (tmp_path / "test_tenants.json").exists()


def test_unreadable_file_starts_empty(tmp_path, caplog):
    (tmp_path / "bottaye_units.json").write_text("{not json")
    cache = LocalCache(tmp_path)

    assert cache.all("units") == []
    assert "unreadable" in caplog.text

    cache.put("units", {"id": "u1"})
    assert cache.get("units", "u1") == {"id": "u1"}


def test_clear(tmp_path):
    cache = LocalCache(tmp_path)
    cache.put("units", {"id": "u1"})
    cache.put("tenants", {"id": "t1"})

    cache.clear("units")
    assert cache.all("units") == []
    assert cache.get("tenants", "t1") == {"id": "t1"}

    cache.clear()
    assert cache.all("tenants") == []
    assert list(tmp_path.glob("*.tmp")) == []
