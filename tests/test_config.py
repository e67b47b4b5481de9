from pathfind.config import DEFAULT_BASE_URL, get_config
from pathfind.services.autocomplete import options_from_config


def test_defaults_without_secrets():
    cfg = get_config()
    assert cfg["base_url"] == DEFAULT_BASE_URL
    assert cfg["min_chars"] == 2
    assert cfg["debounce_ms"] == 200
    assert cfg["max_results"] == 8
    assert cfg["types"] == "city,state,country"
    assert cfg["allow_free_text"] is True
    assert cfg["log_level"] == "INFO"


def test_bad_numbers_fall_back_to_defaults():
    cfg = get_config({"PLACES_MAX_RESULTS": "lots", "PLACES_MIN_CHARS": -1, "PLACES_TIMEOUT_SEC": None})
    assert cfg["max_results"] == 8
    assert cfg["min_chars"] == 2
    assert cfg["timeout_sec"] == 5.0


def test_timeout_is_clamped():
    cfg = get_config({"PLACES_TIMEOUT_SEC": "0.2"})
    assert cfg["configured_timeout_sec"] == 0.2
    assert cfg["timeout_sec"] == 1.0


def test_string_booleans_and_url():
    cfg = get_config({"PLACES_ALLOW_FREE_TEXT": "false", "PLACES_API_BASE_URL": "https://api.pathfind.test/", "LOG_LEVEL": "debug"})
    assert cfg["allow_free_text"] is False
    assert cfg["base_url"] == "https://api.pathfind.test"
    assert cfg["log_level"] == "DEBUG"


def test_options_from_config_with_overrides():
    cfg = get_config({"PLACES_DEBOUNCE_MS": 300, "PLACES_TYPES": "city"})
    options = options_from_config(cfg, placeholder="Where to?")
    assert options.debounce_delay == 0.3
    assert options.types == "city"
    assert options.placeholder == "Where to?"
    assert options.min_chars == 2
