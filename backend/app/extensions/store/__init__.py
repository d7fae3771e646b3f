from .settings_store import InMemorySettingsStore, JsonFileSettingsStore, SettingsStore
