import importlib.util
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

_MISSING_DEPS = any(
    importlib.util.find_spec(name) is None for name in ("httpx", "pydantic_settings")
)

if not _MISSING_DEPS:
    import httpx

    from smallfarm.application.services.crop_service import generate_crop_details
    from smallfarm.infra.auth import (
        HttpSessionVerifier,
        StaticTokenVerifier,
        bearer_token,
        build_session_verifier,
        parse_static_tokens,
    )
    from smallfarm.infra.config import AppConfig, get_config
    from smallfarm.infra.farm_store import MemoryFarmStore, SqliteFarmStore, build_farm_store
    from smallfarm.schemas import CropDetails


@unittest.skipUnless(not _MISSING_DEPS, "httpx/pydantic_settings not installed")
class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._env_backup = {
            key: os.environ.get(key)
            for key in ("FARM_STORE", "LLM_PROVIDER", "SCHEDULE_REGENERATE_MODE")
        }
        get_config.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._env_backup.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_config.cache_clear()

    def test_env_values_are_normalized(self) -> None:
        os.environ["FARM_STORE"] = "Memory"
        os.environ["LLM_PROVIDER"] = "MOCK"
        os.environ["SCHEDULE_REGENERATE_MODE"] = "Append"
        cfg = get_config()
        self.assertEqual(cfg.farm_store, "memory")
        self.assertEqual(cfg.llm_provider, "mock")
        self.assertEqual(cfg.schedule_regenerate_mode, "append")
        self.assertIsInstance(build_farm_store(), MemoryFarmStore)

    def test_rejects_unknown_regenerate_mode(self) -> None:
        with self.assertRaises(ValueError):
            AppConfig(SCHEDULE_REGENERATE_MODE="merge")

    def test_sqlite_store_path(self) -> None:
        import tempfile

        with tempfile.TemporaryDirectory() as tmp:
            cfg = AppConfig(FARM_STORE="sqlite", FARM_STORE_PATH=str(Path(tmp) / "f.sqlite3"))
            store = build_farm_store(cfg)
            self.assertIsInstance(store, SqliteFarmStore)
            self.assertTrue((Path(tmp) / "f.sqlite3").exists())

    def test_cors_origins(self) -> None:
        cfg = AppConfig(CORS_ALLOW_ORIGINS="https://farm.example, http://localhost:8081")
        self.assertEqual(cfg.cors_origins(), ["https://farm.example", "http://localhost:8081"])

    def test_mock_llm_yields_empty_crop_details(self) -> None:
        os.environ["LLM_PROVIDER"] = "mock"
        details = generate_crop_details("Okra", "vegetables")
        self.assertIsNone(details.days_to_maturity)
        self.assertIsNone(details.row_spacing)

    def test_crop_details_use_injected_settings(self) -> None:
        os.environ["LLM_PROVIDER"] = "mock"
        cfg = AppConfig(LLM_PROVIDER="openai", OPENAI_API_KEY="sk-test")
        with patch("smallfarm.infra.llm_extract.get_chat_model") as chat_model:
            extractor = chat_model.return_value.with_structured_output.return_value
            extractor.invoke.return_value = CropDetails(days_to_maturity=60)
            details = generate_crop_details("Okra", "vegetables", cfg=cfg)
        chat_model.assert_called_once_with(cfg)
        self.assertEqual(details.days_to_maturity, 60)


@unittest.skipUnless(not _MISSING_DEPS, "httpx/pydantic_settings not installed")
class SessionVerifierTests(unittest.TestCase):
    def test_parse_static_tokens(self) -> None:
        self.assertEqual(
            parse_static_tokens(" t1=alice, broken ,t2 = bob,=x,t3="),
            {"t1": "alice", "t2": "bob"},
        )
        self.assertEqual(parse_static_tokens(None), {})

    def test_bearer_token(self) -> None:
        self.assertEqual(bearer_token("Bearer abc"), "abc")
        self.assertEqual(bearer_token("bearer  abc "), "abc")
        self.assertIsNone(bearer_token("Basic abc"))
        self.assertIsNone(bearer_token("Bearer "))
        self.assertIsNone(bearer_token(None))

    def test_static_verifier(self) -> None:
        verifier = StaticTokenVerifier({"t1": "alice"})
        self.assertEqual(verifier.verify("t1").user_id, "alice")
        self.assertIsNone(verifier.verify("t2"))

    def test_build_verifier_from_config(self) -> None:
        cfg = AppConfig(AUTH_PROVIDER="static", AUTH_STATIC_TOKENS="dev=farmer-1")
        self.assertEqual(build_session_verifier(cfg).verify("dev").user_id, "farmer-1")
        with self.assertRaises(ValueError):
            build_session_verifier(AppConfig(AUTH_PROVIDER="http"))

    def test_http_verifier(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("Authorization"))
            if request.headers.get("Authorization") == "Bearer good":
                return httpx.Response(200, json={"user": {"id": "u-1", "email": "a@b.c"}})
            if request.headers.get("Authorization") == "Bearer odd":
                return httpx.Response(200, json={"session": None})
            if request.headers.get("Authorization") == "Bearer boom":
                return httpx.Response(502, text="bad gateway")
            return httpx.Response(401, json={"error": "invalid session"})

        verifier = HttpSessionVerifier(
            "https://auth.example/api/session", transport=httpx.MockTransport(handler)
        )
        user = verifier.verify("good")
        self.assertEqual(user.user_id, "u-1")
        self.assertEqual(user.email, "a@b.c")
        self.assertIsNone(verifier.verify("bad"))
        self.assertIsNone(verifier.verify("odd"))
        self.assertIsNone(verifier.verify("boom"))
        self.assertEqual(seen[0], "Bearer good")


if __name__ == "__main__":
    unittest.main()
