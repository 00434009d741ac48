import json

from Jellyfin_Source.core import preferences
from Jellyfin_Source.core.preferences import PreferenceStore, get_store


def test_store_persists_to_json(tmp_path):
    path = tmp_path / "source_jellyfin_preferences.json"
    store = PreferenceStore(path)

    store.edit(server_url="http://a", api_key="KEY")

    assert json.loads(path.read_text(encoding="utf-8")) == {"server_url": "http://a", "api_key": "KEY"}
    assert PreferenceStore(path).get("api_key") == "KEY"


def test_missing_key_returns_default():
    assert PreferenceStore().get("user_id") == ""
    assert PreferenceStore().get("user_id", "none") == "none"


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")

    assert PreferenceStore(path).as_dict() == {}


def test_get_store_is_shared_per_source_id(tmp_path):
    preferences.reset_stores()
    try:
        first = get_store("jf-1", tmp_path)
        again = get_store("jf-1", tmp_path)
        other = get_store("jf-2", tmp_path)

        assert first is again
        assert first is not other
        assert first.path == tmp_path / "source_jf-1_preferences.json"
    finally:
        preferences.reset_stores()


def test_unwritable_location_keeps_values_in_memory(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = PreferenceStore(blocker / "source_jellyfin_preferences.json")

    store.edit(api_key="KEY", user_id="u1")
    store.edit(api_key="", user_id="")

    assert store.as_dict() == {"api_key": "", "user_id": ""}
    assert blocker.read_text(encoding="utf-8") == "not a directory"
