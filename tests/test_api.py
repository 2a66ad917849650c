import importlib.util
import os
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

_MISSING_DEPS = any(
    importlib.util.find_spec(name) is None
    for name in ("fastapi", "httpx", "pydantic_settings")
)

if not _MISSING_DEPS:
    from fastapi.testclient import TestClient

    from smallfarm.api.server import create_app
    from smallfarm.infra.auth import StaticTokenVerifier
    from smallfarm.infra.config import AppConfig, get_config
    from smallfarm.infra.farm_store import MemoryFarmStore
    from smallfarm.schemas import CropDetails, FieldBed

    class _BrokenStore(MemoryFarmStore):
        def list_schedule_tasks(self, user_id):
            raise RuntimeError("database is locked")


ALICE = {"Authorization": "Bearer alice-token"}
BOB = {"Authorization": "Bearer bob-token"}


def _settings(**overrides):
    values = {"FARM_STORE": "memory", "LLM_PROVIDER": "mock"}
    values.update(overrides)
    return AppConfig(**values)


@unittest.skipUnless(not _MISSING_DEPS, "fastapi/httpx/pydantic_settings not installed")
class ScheduleApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryFarmStore()
        self.details_calls = []

        def fake_details(name, category):
            self.details_calls.append((name, category))
            return CropDetails(days_to_maturity=80, soil_ph="6.0-7.0")

        app = create_app(
            store=self.store,
            verifier=StaticTokenVerifier({"alice-token": "alice", "bob-token": "bob"}),
            crop_details=fake_details,
            settings=_settings(),
        )
        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def _crop_id(self, name: str) -> str:
        crops = self.client.get("/api/crops/public").json()
        return next(crop["id"] for crop in crops if crop["name"] == name)

    def _plant(self, crop_id: str, planting_date: str = "2024-03-01", headers=ALICE) -> str:
        bed = self.client.post(
            "/api/fields-beds",
            json={"name": "South field", "type": "field", "acreage": "0.25"},
            headers=headers,
        )
        self.assertEqual(bed.status_code, 200, bed.text)
        assignment = self.client.post(
            f"/api/fields-beds/{bed.json()['id']}/crops",
            json={"cropId": crop_id, "plantingDate": planting_date},
            headers=headers,
        )
        self.assertEqual(assignment.status_code, 200, assignment.text)
        return assignment.json()["id"]

    def test_health_and_trace_header(self) -> None:
        response = self.client.get("/health", headers={"X-Request-ID": "trace-123"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok", "store": "memory"})
        self.assertEqual(response.headers["X-Request-ID"], "trace-123")

    def test_requires_bearer_token(self) -> None:
        for headers in ({}, {"Authorization": "Bearer nope"}, {"Authorization": "Basic abc"}):
            response = self.client.get("/api/schedules", headers=headers)
            self.assertEqual(response.status_code, 401)
            self.assertEqual(response.json(), {"error": "Unauthorized"})

    def test_generate_schedule_end_to_end(self) -> None:
        custom = self.client.post(
            "/api/crops/custom",
            json={"name": "Ground cherry", "category": "fruit"},
            headers=ALICE,
        )
        self.assertEqual(custom.status_code, 200, custom.text)
        self.assertEqual(custom.json()["daysToMaturity"], 80)
        self.assertTrue(custom.json()["isCustom"])
        self.assertEqual(self.details_calls[0][0], "Ground cherry")

        planting_id = self._plant(custom.json()["id"], "2024-03-01T00:00:00.000Z")
        response = self.client.post(
            "/api/schedules/generate", json={"fieldBedCropId": planting_id}, headers=ALICE
        )
        self.assertEqual(response.status_code, 200, response.text)
        tasks = response.json()
        self.assertEqual(
            [(t["taskType"], t["dueDate"]) for t in tasks],
            [
                ("water", "2024-03-04"),
                ("fertilize", "2024-03-15"),
                ("weed", "2024-03-22"),
                ("fertilize", "2024-04-05"),
                ("pest_control", "2024-04-12"),
                ("water", "2024-04-20"),
                ("harvest", "2024-05-20"),
            ],
        )
        self.assertTrue(all(t["fieldBedCropId"] == planting_id for t in tasks))
        self.assertTrue(all(t["userId"] == "alice" for t in tasks))

        listed = self.client.get("/api/schedules", headers=ALICE).json()
        self.assertEqual(len(listed), 7)
        self.assertEqual(listed[0]["fieldBedCrop"]["crop"]["name"], "Ground cherry")
        self.assertEqual(listed[0]["fieldBedCrop"]["fieldBed"]["name"], "South field")

    def test_generate_unknown_assignment_is_404(self) -> None:
        response = self.client.post(
            "/api/schedules/generate", json={"fieldBedCropId": "missing"}, headers=ALICE
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Field bed crop not found"})
        self.assertEqual(self.client.get("/api/schedules", headers=ALICE).json(), [])

    def test_generate_other_users_assignment_is_404(self) -> None:
        planting_id = self._plant(self._crop_id("Kale"))
        response = self.client.post(
            "/api/schedules/generate", json={"fieldBedCropId": planting_id}, headers=BOB
        )
        self.assertEqual(response.status_code, 404)

    def test_regenerate_replaces_batch(self) -> None:
        planting_id = self._plant(self._crop_id("Kale"))
        for _ in range(2):
            self.client.post(
                "/api/schedules/generate", json={"fieldBedCropId": planting_id}, headers=ALICE
            )
        self.assertEqual(len(self.client.get("/api/schedules", headers=ALICE).json()), 7)

    def test_patch_and_delete(self) -> None:
        planting_id = self._plant(self._crop_id("Tomato"))
        tasks = self.client.post(
            "/api/schedules/generate", json={"fieldBedCropId": planting_id}, headers=ALICE
        ).json()
        first = tasks[0]

        patched = self.client.patch(
            f"/api/schedules/{first['id']}",
            json={"completed": True, "completedDate": "2024-03-04"},
            headers=ALICE,
        )
        self.assertEqual(patched.status_code, 200, patched.text)
        body = patched.json()
        self.assertTrue(body["completed"])
        self.assertEqual(body["completedDate"], "2024-03-04")
        self.assertEqual(body["notes"], "Initial watering")

        foreign = self.client.patch(
            f"/api/schedules/{first['id']}", json={"notes": "mine now"}, headers=BOB
        )
        self.assertEqual(foreign.status_code, 404)

        deleted = self.client.delete(f"/api/schedules/{first['id']}", headers=ALICE)
        self.assertEqual(deleted.json(), {"success": True})
        remaining = [t["id"] for t in self.client.get("/api/schedules", headers=ALICE).json()]
        self.assertNotIn(first["id"], remaining)
        self.assertEqual(len(remaining), 6)

        again = self.client.delete(f"/api/schedules/{first['id']}", headers=ALICE)
        self.assertEqual(again.json(), {"success": True})

    def test_weather_annotations(self) -> None:
        planting_id = self._plant(self._crop_id("Tomato"))
        tasks = self.client.post(
            "/api/schedules/generate", json={"fieldBedCropId": planting_id}, headers=ALICE
        ).json()
        pest = next(t for t in tasks if t["taskType"] == "pest_control")
        response = self.client.patch(
            f"/api/schedules/{pest['id']}/weather",
            json={"weatherRecommendation": "Hold spraying until wind drops", "weatherPriority": "medium"},
            headers=ALICE,
        )
        self.assertEqual(
            response.json(),
            {
                "id": pest["id"],
                "weatherRecommendation": "Hold spraying until wind drops",
                "weatherPriority": "medium",
            },
        )
        views = self.client.get("/api/schedules/with-weather", headers=ALICE).json()
        view = next(v for v in views if v["id"] == pest["id"])
        self.assertEqual(view["taskDescription"], "Pest control Tomato")
        self.assertEqual(view["crop"]["name"], "Tomato")
        self.assertEqual(view["weatherPriority"], "medium")

        invalid = self.client.patch(
            f"/api/schedules/{pest['id']}/weather",
            json={"weatherRecommendation": "x", "weatherPriority": "urgent"},
            headers=ALICE,
        )
        self.assertEqual(invalid.status_code, 422)

    def test_crop_listing_with_optional_auth(self) -> None:
        self.client.post(
            "/api/crops/custom", json={"name": "Tomatillo", "category": "vegetables"}, headers=ALICE
        )
        public = self.client.get("/api/crops/public").json()
        anonymous = self.client.get("/api/crops").json()
        invalid = self.client.get("/api/crops", headers={"Authorization": "Bearer nope"}).json()
        mine = self.client.get("/api/crops", headers=ALICE).json()
        self.assertEqual(len(anonymous), len(public))
        self.assertEqual(len(invalid), len(public))
        self.assertEqual(len(mine), len(public) + 1)
        self.assertNotIn("Tomatillo", [c["name"] for c in public])

    def test_field_bed_validation(self) -> None:
        response = self.client.post(
            "/api/fields-beds", json={"name": "Bed 3", "type": "greenhouse"}, headers=ALICE
        )
        self.assertEqual(response.status_code, 422)
        response = self.client.post(
            "/api/fields-beds",
            json={"name": "Bed 3", "type": "bed", "irrigationType": "Drip Irrigation", "squareFootage": "120"},
            headers=ALICE,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["irrigationType"], "drip")
        self.assertEqual(response.json()["squareFootage"], 120.0)

    def test_delete_field_bed(self) -> None:
        planting_id = self._plant(self._crop_id("Tomato"))
        self.client.post(
            "/api/schedules/generate", json={"fieldBedCropId": planting_id}, headers=ALICE
        )
        field_bed_id = self.client.get("/api/fields-beds", headers=ALICE).json()[0]["id"]
        response = self.client.delete(f"/api/fields-beds/{field_bed_id}", headers=ALICE)
        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.client.get("/api/fields-beds", headers=ALICE).json(), [])
        self.assertEqual(self.client.get("/api/schedules", headers=ALICE).json(), [])


@unittest.skipUnless(not _MISSING_DEPS, "fastapi/httpx/pydantic_settings not installed")
class ErrorHandlingTests(unittest.TestCase):
    def test_unexpected_error_is_generic_500(self) -> None:
        app = create_app(
            store=_BrokenStore(),
            verifier=StaticTokenVerifier({"alice-token": "alice"}),
            settings=_settings(SEED_SYSTEM_CROPS="false"),
        )
        client = TestClient(app, raise_server_exceptions=False)
        with self.assertLogs("smallfarm.events", level="ERROR") as captured:
            response = client.get(
                "/api/schedules", headers={**ALICE, "X-Request-ID": "req-42"}
            )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(), {"error": "Internal Server Error", "traceId": "req-42"}
        )
        self.assertEqual(response.headers["X-Request-ID"], "req-42")
        request_failed = [r for r in captured.records if "request_failed" in r.getMessage()]
        self.assertEqual(len(request_failed), 1)
        self.assertIsNotNone(request_failed[0].exc_info)
        self.assertIn("database is locked", request_failed[0].getMessage())


@unittest.skipUnless(not _MISSING_DEPS, "fastapi/httpx/pydantic_settings not installed")
class AppWiringTests(unittest.TestCase):
    def setUp(self) -> None:
        self._env_backup = {
            key: os.environ.get(key) for key in ("LLM_PROVIDER", "OPENAI_API_KEY")
        }
        get_config.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._env_backup.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_config.cache_clear()

    def test_each_app_builds_its_own_collaborators(self) -> None:
        settings = _settings(AUTH_STATIC_TOKENS="field-token=farmer-9")
        first = create_app(settings=settings)
        second = create_app(settings=settings)
        self.assertIsNot(first.state.store, second.state.store)
        self.assertEqual(first.state.store.name, "memory")
        self.assertEqual(first.state.verifier.verify("field-token").user_id, "farmer-9")

        first.state.store.insert_field_bed(
            FieldBed(
                id="fb-1",
                user_id="farmer-9",
                name="Plot A",
                type="field",
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        )
        self.assertEqual(len(first.state.store.list_field_beds("farmer-9")), 1)
        self.assertEqual(second.state.store.list_field_beds("farmer-9"), [])

    def test_injected_settings_reach_crop_details(self) -> None:
        os.environ["LLM_PROVIDER"] = "openai"
        os.environ["OPENAI_API_KEY"] = "sk-test"
        get_config.cache_clear()
        app = create_app(
            store=MemoryFarmStore(),
            verifier=StaticTokenVerifier({"alice-token": "alice"}),
            settings=_settings(LLM_PROVIDER="mock"),
        )
        client = TestClient(app)
        with patch("smallfarm.infra.llm_extract.get_chat_model") as chat_model:
            response = client.post(
                "/api/crops/custom",
                json={"name": "Okra", "category": "vegetables"},
                headers=ALICE,
            )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertIsNone(response.json()["daysToMaturity"])
        chat_model.assert_not_called()


if __name__ == "__main__":
    unittest.main()
