import json
from core.store import LAST_EMOTION_KEY, SettingsStore, load_json


def test_defaults_on_missing_file(tmp_path):
    store = SettingsStore(tmp_path / "nested" / "settings.json")
    assert store.theme == "light"
    assert store.last_emotion == ""
    assert not store.path.exists()

def test_values_persist_across_instances(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = SettingsStore(path)
    store.last_emotion = "sad"
    assert store.toggle_theme() == "dark"

    again = SettingsStore(path)
    assert again.theme == "dark"
    assert again.last_emotion == "sad"
    assert json.loads(path.read_text(encoding="utf-8"))[LAST_EMOTION_KEY] == "sad"

def test_toggle_back_and_unknown_theme(tmp_path):
    store = SettingsStore(tmp_path / "s.json")
    store.toggle_theme()
    assert store.toggle_theme() == "light"
    store.theme = "sepia"
    assert store.theme == "light"

def test_empty_emotion_is_not_written(tmp_path):
    store = SettingsStore(tmp_path / "s.json")
    store.last_emotion = "happy"
    store.last_emotion = ""
    assert SettingsStore(tmp_path / "s.json").last_emotion == "happy"

def test_malformed_file_starts_fresh(tmp_path):
    path = tmp_path / "s.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_json(path) == {}
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_json(path) == {}
    path.write_text("   ", encoding="utf-8")
    store = SettingsStore(path)
    assert store.theme == "light"
