import json
import os
import tempfile
import unittest
from unittest import mock

from harmonic_finder.core.config import ConfigManager
from harmonic_finder.core.events import ResolutionEvents, ResolutionEventType
from harmonic_finder.core.factory import ComponentFactory
from harmonic_finder.services.cache import JsonFileCacheStore, MemoryCacheStore, NullCacheStore
from harmonic_finder.services.resolution import OpenAIResolutionService


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = self._tmp.name
        env = mock.patch.dict(os.environ, {}, clear=True)
        env.start()
        self.addCleanup(env.stop)
        self.addCleanup(self._tmp.cleanup)


class TestConfigManager(ConfigTestCase):
    def test_defaults_are_written(self):
        manager = ConfigManager(self.config_dir)
        for name in ["resolution", "cache", "fretboard", "logging"]:
            self.assertTrue(os.path.exists(os.path.join(self.config_dir, f"{name}.json")))
        self.assertEqual(manager.get_config("fretboard")["string_count"], 6)
        self.assertEqual(manager.get_config("resolution")["model"], "gpt-4o-mini")
        self.assertIsNone(manager.get_config("resolution")["api_key"])
        self.assertFalse(manager.get_config("logging")["log_timings"])

    def test_updates_persist(self):
        manager = ConfigManager(self.config_dir)
        self.assertTrue(manager.update_config("fretboard", {"fret_count": 15}))
        self.assertEqual(ConfigManager(self.config_dir).get_config("fretboard")["fret_count"], 15)
        self.assertFalse(manager.update_config("audio", {"x": 1}))

        self.assertTrue(manager.reset_config("fretboard"))
        self.assertEqual(manager.get_config("fretboard")["fret_count"], 24)
        self.assertFalse(manager.reset_config("audio"))

    def test_missing_keys_filled_from_defaults(self):
        with open(os.path.join(self.config_dir, "fretboard.json"), "w") as f:
            json.dump({"preset": "fourths"}, f)
        config = ConfigManager(self.config_dir).get_config("fretboard")
        self.assertEqual(config["preset"], "fourths")
        self.assertEqual(config["string_count"], 6)

    def test_corrupt_file_uses_defaults(self):
        with open(os.path.join(self.config_dir, "cache.json"), "w") as f:
            f.write("{broken")
        self.assertTrue(ConfigManager(self.config_dir).get_config("cache")["enabled"])

    def test_environment_overrides(self):
        manager = ConfigManager(self.config_dir)
        self.assertEqual(
            manager.get_config("cache")["directory"], os.path.join(self.config_dir, "cache")
        )
        with mock.patch.dict(os.environ, {
            "OPENAI_API_KEY": "secret",
            "OPENAI_MODEL": "other-model",
            "HARMONIC_FINDER_CACHE_DIR": "/tmp/hf-cache",
            "LOG_TIMINGS": "1",
        }):
            self.assertEqual(manager.get_config("resolution")["api_key"], "secret")
            self.assertEqual(manager.get_config("resolution")["model"], "other-model")
            self.assertEqual(manager.get_config("cache")["directory"], "/tmp/hf-cache")
            self.assertTrue(manager.get_config("logging")["log_timings"])

    def test_custom_api_key_variable(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("resolution", {"api_key_env": "MY_KEY"})
        with mock.patch.dict(os.environ, {"MY_KEY": "abc"}):
            self.assertEqual(manager.get_config("resolution")["api_key"], "abc")


class TestComponentFactory(ConfigTestCase):
    def setUp(self):
        super().setUp()
        self.factory = ComponentFactory(ConfigManager(self.config_dir))

    def test_no_service_without_key(self):
        self.assertIsNone(self.factory.create_resolution_service())

    def test_service_from_config(self):
        with mock.patch.dict(os.environ, {"OPENAI_API_KEY": "secret"}):
            service = self.factory.create_resolution_service()
        self.assertIsInstance(service, OpenAIResolutionService)
        self.assertEqual(service.model, "gpt-4o-mini")
        self.assertEqual(service.timeout, 20.0)

    def test_unknown_implementations(self):
        with self.assertRaises(ValueError):
            self.factory.create_resolution_service("local-llm")
        with self.assertRaises(ValueError):
            self.factory.create_cache_store("redis")

    def test_cache_stores(self):
        store = self.factory.create_cache_store()
        self.assertIsInstance(store, JsonFileCacheStore)
        self.assertEqual(str(store.directory), os.path.join(self.config_dir, "cache"))
        self.assertIsInstance(self.factory.create_cache_store("memory"), MemoryCacheStore)

        self.factory.config_manager.update_config("cache", {"enabled": False})
        self.assertIsInstance(self.factory.create_cache_store(), NullCacheStore)

    def test_resolvers_share_events(self):
        chord = self.factory.create_chord_resolver()
        scale = self.factory.create_scale_resolver()
        self.assertIs(chord.events, self.factory.events)
        self.assertIs(scale.events, self.factory.events)
        self.assertIsNone(chord.service)
        self.assertEqual(chord.resolve("Am").source, "local")


class TestResolutionEvents(unittest.TestCase):
    def test_typed_and_catch_all_listeners(self):
        events = ResolutionEvents()
        hits, everything = [], []
        events.on(lambda t, p: hits.append(p), ResolutionEventType.CACHE_HIT)
        events.on(lambda t, p: everything.append(t))

        events.emit(ResolutionEventType.CACHE_HIT, kind="chord", cache_key="k")
        events.emit(ResolutionEventType.FAILED, kind="scale")

        self.assertEqual(hits, [{"kind": "chord", "cache_key": "k"}])
        self.assertEqual(everything, [ResolutionEventType.CACHE_HIT, ResolutionEventType.FAILED])

    def test_failing_listener_is_isolated(self):
        events = ResolutionEvents()
        seen = []

        def broken(event_type, payload):
            raise RuntimeError("listener bug")

        events.on(broken)
        events.on(lambda t, p: seen.append(t))
        events.emit(ResolutionEventType.RESOLVED)
        self.assertEqual(seen, [ResolutionEventType.RESOLVED])

    def test_clear(self):
        events = ResolutionEvents()
        seen = []
        events.on(lambda t, p: seen.append(t))
        events.clear()
        events.emit(ResolutionEventType.RESOLVED)
        self.assertEqual(seen, [])


if __name__ == "__main__":
    unittest.main()
