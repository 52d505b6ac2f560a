import base64
import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from countrycache.core.cache_service import CacheService
from countrycache.domain.exceptions import EmptyKeyError
from countrycache.domain.models.common import CacheConfig
from countrycache.infrastructure.cache.disk_manager import DiskCacheManager


@pytest.fixture
def mock_manager():
    return MagicMock(spec=DiskCacheManager)


@pytest.fixture
def service(cache_config: CacheConfig, mock_manager: MagicMock):
    """CacheService with a mocked manager."""
    return CacheService(config=cache_config, manager=mock_manager)


@pytest.fixture
def disk_service(cache_config: CacheConfig):
    """CacheService backed by a real DiskCacheManager."""
    service = CacheService(config=cache_config)
    yield service
    service.manager.close()


# --- Delegation ---

def test_get_and_set_delegate_when_enabled(service: CacheService, mock_manager: MagicMock):
    mock_manager.get.return_value = "value"
    mock_manager.set.return_value = True

    assert service.get("k", "d") == "value"
    assert service.set("k", "value", 10) is True

    mock_manager.get.assert_called_once_with("k", "d")
    mock_manager.set.assert_called_once_with("k", "value", 10)


def test_reads_and_writes_short_circuit_when_disabled(
    service: CacheService, cache_config: CacheConfig, mock_manager: MagicMock
):
    cache_config.enabled = False

    assert service.get("k", "d") == "d"
    assert service.set("k", "v") is False
    assert service.has("k") is False
    assert service.get_multiple(["a", "b"], 0) == {"a": 0, "b": 0}
    assert service.set_multiple({"a": 1}) is False

    mock_manager.get.assert_not_called()
    mock_manager.set.assert_not_called()
    mock_manager.has.assert_not_called()
    mock_manager.get_multiple.assert_not_called()
    mock_manager.set_multiple.assert_not_called()


def test_invalidation_forwards_when_disabled(
    service: CacheService, cache_config: CacheConfig, mock_manager: MagicMock
):
    cache_config.enabled = False
    mock_manager.delete.return_value = True
    mock_manager.clear.return_value = True
    mock_manager.delete_multiple.return_value = True

    assert service.delete("k") is True
    assert service.clear() is True
    assert service.delete_multiple(["a", "b"]) is True

    mock_manager.delete.assert_called_once_with("k")
    mock_manager.clear.assert_called_once_with()
    mock_manager.delete_multiple.assert_called_once_with(["a", "b"])


def test_bulk_operations_delegate_when_enabled(service: CacheService, mock_manager: MagicMock):
    mock_manager.get_multiple.return_value = {"a": 1}
    mock_manager.set_multiple.return_value = True
    mock_manager.has.return_value = True

    assert service.get_multiple(["a"], None) == {"a": 1}
    assert service.set_multiple({"a": 1}, 5) is True
    assert service.has("a") is True

    mock_manager.set_multiple.assert_called_once_with({"a": 1}, 5)


def test_remember_disabled_runs_producer_without_storage(
    service: CacheService, cache_config: CacheConfig, mock_manager: MagicMock
):
    cache_config.enabled = False
    producer = MagicMock(return_value="fresh")

    assert service.remember("k", 5, producer) == "fresh"
    producer.assert_called_once_with()
    mock_manager.get.assert_not_called()
    mock_manager.set.assert_not_called()


# --- Construction ---

def test_default_manager_shares_config(cache_config: CacheConfig, cache_dir: Path):
    service = CacheService(config=cache_config)
    assert isinstance(service.manager, DiskCacheManager)
    assert service.manager.config is cache_config
    assert service.manager.get_cache_dir() == cache_dir
    service.manager.close()


def test_path_is_passed_to_default_manager(cache_config: CacheConfig, tmp_path: Path):
    service = CacheService(config=cache_config, path=tmp_path / "elsewhere")
    assert service.manager.get_cache_dir() == tmp_path / "elsewhere"
    service.manager.close()


def test_config_from_provider(mock_manager: MagicMock):
    provider = MagicMock()
    provider.get.side_effect = lambda key, default=None: {
        "countries.cache.enabled": False,
        "cache.duration": 30,
    }.get(key, default)

    service = CacheService(config=provider, manager=mock_manager)

    assert service.enabled is False
    assert service.config.duration == 30


def test_config_defaults_to_settings(mocker, mock_manager: MagicMock):
    settings_cls = mocker.patch("countrycache.core.cache_service.Settings")
    settings_cls.return_value.get.side_effect = lambda key, default=None: default

    service = CacheService(manager=mock_manager)

    settings_cls.assert_called_once_with()
    assert service.config == CacheConfig()


# --- Keys ---

def test_make_key_without_arguments_fails(service: CacheService):
    with pytest.raises(EmptyKeyError, match="Empty key"):
        service.make_key()


def test_empty_key_error_is_a_value_error(service: CacheService):
    with pytest.raises(ValueError):
        service.make_key()


def test_make_key_is_deterministic(service: CacheService):
    assert service.make_key("countries", "BR", 3) == service.make_key("countries", "BR", 3)


def test_make_key_depends_on_argument_order(service: CacheService):
    assert service.make_key("a", "b") != service.make_key("b", "a")


def test_make_key_distinguishes_types(service: CacheService):
    assert service.make_key(1) != service.make_key("1")


def test_make_key_is_base64_of_serialized_arguments(service: CacheService):
    key = service.make_key("where", {"cca2": "BR"}, [1, 2])
    decoded = json.loads(base64.b64decode(key).decode("utf-8"))
    assert decoded == ["where", {"__dict__": [["cca2", "BR"]]}, [1, 2]]


def test_make_key_ignores_dict_insertion_order(service: CacheService):
    assert service.make_key({"a": 1, "b": 2}) == service.make_key({"b": 2, "a": 1})


def test_make_key_accepts_non_string_dict_keys(service: CacheService):
    first = service.make_key({("BR", 1): "x", 2: "y"})
    second = service.make_key({2: "y", ("BR", 1): "x"})
    assert first == second
    assert first != service.make_key({("BR", 2): "x", 2: "y"})


def test_make_key_sorts_sets(service: CacheService):
    codes = ["PT", "BR", "AR", "DE"]
    forward = set()
    backward = set()
    for code in codes:
        forward.add(code)
    for code in reversed(codes):
        backward.add(code)

    key = service.make_key(forward)
    assert key == service.make_key(backward)
    assert json.loads(base64.b64decode(key)) == [{"__set__": ["AR", "BR", "DE", "PT"]}]


def test_make_key_separates_tuples_from_lists(service: CacheService):
    assert service.make_key((1, 2)) != service.make_key([1, 2])
    assert service.make_key({1, 2}) != service.make_key(frozenset({1, 2}))


def test_make_key_uses_object_state_not_identity(service: CacheService):
    class Region:
        def __init__(self, name):
            self.name = name

    assert service.make_key(Region("Americas")) == service.make_key(Region("Americas"))
    assert service.make_key(Region("Americas")) != service.make_key(Region("Europe"))

    decoded = json.loads(base64.b64decode(service.make_key(Region("Americas"))))
    assert decoded[0]["state"] == {"__dict__": [["name", "Americas"]]}
    assert decoded[0]["__object__"].endswith("Region")


def test_make_key_handles_self_referencing_values(service: CacheService):
    looped = ["BR"]
    looped.append(looped)

    key = service.make_key(looped)
    assert json.loads(base64.b64decode(key)) == [["BR", {"__cycle__": "builtins.list"}]]


# --- End to end with diskcache ---

def test_set_get_clear_scenario(disk_service: CacheService):
    assert disk_service.set("a", "1", 60) is True
    assert disk_service.get("a") == "1"
    assert disk_service.clear() is True
    assert disk_service.get("a", "default") == "default"


def test_unknown_key_misses(disk_service: CacheService):
    assert disk_service.get("nope", 42) == 42
    assert disk_service.has("nope") is False


def test_disabled_ignores_prior_state(disk_service: CacheService, cache_config: CacheConfig):
    disk_service.set("a", "1")
    cache_config.enabled = False
    assert disk_service.get("a") is None
    assert disk_service.set("a", "2") is False


def test_remember_stores_once(disk_service: CacheService):
    producer = MagicMock(return_value={"BR": "Brazil"})

    assert disk_service.remember("names", 10, producer) == {"BR": "Brazil"}
    assert disk_service.remember("names", 10, producer) == {"BR": "Brazil"}

    producer.assert_called_once_with()
    assert disk_service.get("names") == {"BR": "Brazil"}


def test_cached_decorator_memoizes_by_arguments(disk_service: CacheService):
    calls = []

    @disk_service.cached(ttl=5)
    def lookup(code, upper=False):
        calls.append((code, upper))
        return code.upper() if upper else code

    assert lookup("br") == "br"
    assert lookup("br") == "br"
    assert lookup("br", upper=True) == "BR"
    assert lookup("pt") == "pt"

    assert calls == [("br", False), ("br", True), ("pt", False)]
    assert lookup.__name__ == "lookup"


def test_cached_decorator_uses_prefix(service: CacheService, mock_manager: MagicMock):
    mock_manager.get.return_value = "hit"

    @service.cached(prefix="countries")
    def load(code):
        raise AssertionError("should not run on a cache hit")

    assert load("BR") == "hit"
    expected_key = service.make_key("countries", ["BR"], [])
    mock_manager.get.assert_called_once_with(expected_key)


def test_cached_method_hits_for_equal_instances(disk_service: CacheService):
    calls = []

    class Lookup:
        def __init__(self, region):
            self.region = region

        @disk_service.cached(ttl=5)
        def names(self, code):
            calls.append((self.region, code))
            return f"{self.region}:{code}"

    assert Lookup("Americas").names("BR") == "Americas:BR"
    assert Lookup("Americas").names("BR") == "Americas:BR"
    assert Lookup("Europe").names("BR") == "Europe:BR"

    assert calls == [("Americas", "BR"), ("Europe", "BR")]
