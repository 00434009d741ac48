from Jellyfin_Source.core.config_loader import load_config


def test_missing_file_returns_defaults(tmp_path):
    config = load_config(str(tmp_path / "missing.yml"))

    assert config["listing"]["page_size"] == 20
    assert config["listing"]["fallback_library_name"] == "Books"
    assert config["pages"]["probe_limit"] == 100
    assert config["network"]["timeout"] is None


def test_user_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("listing:\n  page_size: 50\nnetwork:\n  timeout: 10\n", encoding="utf-8")

    config = load_config(str(path))

    assert config["listing"]["page_size"] == 50
    assert config["listing"]["fallback_library_name"] == "Books"
    assert config["network"]["timeout"] == 10
    assert config["network"]["use_cloudscraper"] is False


def test_bundled_config_loads():
    config = load_config()
    assert config["source"]["id"] == "jellyfin"
    assert config["logging"]["level"] == "INFO"
