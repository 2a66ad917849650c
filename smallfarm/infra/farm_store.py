"""Persistence for crops, fields/beds, crop assignments and schedule tasks."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime
from enum import Enum
from contextlib import closing
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..schemas import (
    AssignedCrop,
    Crop,
    FieldBed,
    FieldBedCrop,
    FieldBedCropDetail,
    FieldBedWithCrops,
    ScheduleTask,
    ScheduleTaskDetail,
)
from .config import AppConfig, get_config


PATCHABLE_TASK_COLUMNS = frozenset(
    {
        "completed",
        "completed_date",
        "notes",
        "weather_recommendation",
        "weather_priority",
    }
)


class FarmStore:
    name = "abstract"

    # crops
    def list_system_crops(self) -> List[Crop]:
        raise NotImplementedError

    def list_custom_crops(self, user_id: str) -> List[Crop]:
        raise NotImplementedError

    def get_crop(self, crop_id: str) -> Optional[Crop]:
        raise NotImplementedError

    def has_system_crop(self, name: str) -> bool:
        raise NotImplementedError

    def insert_crop(self, crop: Crop) -> Crop:
        raise NotImplementedError

    # fields & beds
    def list_field_beds(self, user_id: str) -> List[FieldBedWithCrops]:
        raise NotImplementedError

    def get_field_bed(self, field_bed_id: str) -> Optional[FieldBed]:
        raise NotImplementedError

    def insert_field_bed(self, field_bed: FieldBed) -> FieldBed:
        raise NotImplementedError

    def delete_field_bed(self, field_bed_id: str, user_id: str) -> None:
        raise NotImplementedError

    # crop assignments
    def insert_field_bed_crop(self, assignment: FieldBedCrop) -> FieldBedCrop:
        raise NotImplementedError

    def get_field_bed_crop(self, field_bed_crop_id: str) -> Optional[FieldBedCropDetail]:
        raise NotImplementedError

    # schedule tasks
    def list_schedule_tasks(self, user_id: str) -> List[ScheduleTaskDetail]:
        raise NotImplementedError

    def save_schedule_batch(
        self,
        user_id: str,
        field_bed_crop_id: str,
        tasks: Sequence[ScheduleTask],
        *,
        replace_existing: bool,
    ) -> List[ScheduleTask]:
        raise NotImplementedError

    def update_schedule_task(
        self, task_id: str, user_id: str, changes: Dict[str, Any]
    ) -> Optional[ScheduleTask]:
        raise NotImplementedError

    def delete_schedule_task(self, task_id: str, user_id: str) -> None:
        raise NotImplementedError


def _check_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(changes) - PATCHABLE_TASK_COLUMNS
    if unknown:
        raise ValueError(f"unsupported schedule task fields: {sorted(unknown)}")
    return changes


class MemoryFarmStore(FarmStore):
    name = "memory"

    def __init__(self) -> None:
        self._crops: Dict[str, Crop] = {}
        self._field_beds: Dict[str, FieldBed] = {}
        self._assignments: Dict[str, FieldBedCrop] = {}
        self._tasks: Dict[str, ScheduleTask] = {}
        self._lock = Lock()

    def list_system_crops(self) -> List[Crop]:
        with self._lock:
            return [crop for crop in self._crops.values() if not crop.is_custom]

    def list_custom_crops(self, user_id: str) -> List[Crop]:
        with self._lock:
            return [
                crop
                for crop in self._crops.values()
                if crop.is_custom and crop.user_id == user_id
            ]

    def get_crop(self, crop_id: str) -> Optional[Crop]:
        with self._lock:
            return self._crops.get(crop_id)

    def has_system_crop(self, name: str) -> bool:
        with self._lock:
            return any(
                crop.name == name and not crop.is_custom
                for crop in self._crops.values()
            )

    def insert_crop(self, crop: Crop) -> Crop:
        with self._lock:
            self._crops[crop.id] = crop
        return crop

    def list_field_beds(self, user_id: str) -> List[FieldBedWithCrops]:
        with self._lock:
            result = []
            for field_bed in self._field_beds.values():
                if field_bed.user_id != user_id:
                    continue
                crops = [
                    AssignedCrop(
                        **assignment.model_dump(),
                        crop=self._crops[assignment.crop_id],
                    )
                    for assignment in self._assignments.values()
                    if assignment.field_bed_id == field_bed.id
                ]
                result.append(FieldBedWithCrops(**field_bed.model_dump(), crops=crops))
            return result

    def get_field_bed(self, field_bed_id: str) -> Optional[FieldBed]:
        with self._lock:
            return self._field_beds.get(field_bed_id)

    def insert_field_bed(self, field_bed: FieldBed) -> FieldBed:
        with self._lock:
            self._field_beds[field_bed.id] = field_bed
        return field_bed

    def delete_field_bed(self, field_bed_id: str, user_id: str) -> None:
        with self._lock:
            field_bed = self._field_beds.get(field_bed_id)
            if field_bed is None or field_bed.user_id != user_id:
                return None
            del self._field_beds[field_bed_id]
            removed = {
                key
                for key, assignment in self._assignments.items()
                if assignment.field_bed_id == field_bed_id
            }
            for key in removed:
                del self._assignments[key]
            for key in [k for k, t in self._tasks.items() if t.field_bed_crop_id in removed]:
                del self._tasks[key]

    def insert_field_bed_crop(self, assignment: FieldBedCrop) -> FieldBedCrop:
        with self._lock:
            if assignment.field_bed_id not in self._field_beds:
                raise ValueError(f"unknown field/bed: {assignment.field_bed_id}")
            if assignment.crop_id not in self._crops:
                raise ValueError(f"unknown crop: {assignment.crop_id}")
            self._assignments[assignment.id] = assignment
        return assignment

    def _assignment_detail(self, assignment: FieldBedCrop) -> FieldBedCropDetail:
        return FieldBedCropDetail(
            **assignment.model_dump(),
            crop=self._crops[assignment.crop_id],
            field_bed=self._field_beds[assignment.field_bed_id],
        )

    def get_field_bed_crop(self, field_bed_crop_id: str) -> Optional[FieldBedCropDetail]:
        with self._lock:
            assignment = self._assignments.get(field_bed_crop_id)
            if assignment is None:
                return None
            return self._assignment_detail(assignment)

    def list_schedule_tasks(self, user_id: str) -> List[ScheduleTaskDetail]:
        with self._lock:
            tasks = [t for t in self._tasks.values() if t.user_id == user_id]
            tasks.sort(key=lambda t: t.due_date)
            return [
                ScheduleTaskDetail(
                    **task.model_dump(),
                    field_bed_crop=self._assignment_detail(
                        self._assignments[task.field_bed_crop_id]
                    ),
                )
                for task in tasks
            ]

    def save_schedule_batch(
        self,
        user_id: str,
        field_bed_crop_id: str,
        tasks: Sequence[ScheduleTask],
        *,
        replace_existing: bool,
    ) -> List[ScheduleTask]:
        with self._lock:
            if field_bed_crop_id not in self._assignments:
                raise ValueError(f"unknown field bed crop: {field_bed_crop_id}")
            if replace_existing:
                stale = [
                    key
                    for key, task in self._tasks.items()
                    if task.user_id == user_id
                    and task.field_bed_crop_id == field_bed_crop_id
                ]
                for key in stale:
                    del self._tasks[key]
            for task in tasks:
                self._tasks[task.id] = task
        return list(tasks)

    def update_schedule_task(
        self, task_id: str, user_id: str, changes: Dict[str, Any]
    ) -> Optional[ScheduleTask]:
        changes = _check_changes(changes)
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task.user_id != user_id:
                return None
            updated = ScheduleTask.model_validate({**task.model_dump(), **changes})
            self._tasks[task_id] = updated
            return updated

    def delete_schedule_task(self, task_id: str, user_id: str) -> None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is not None and task.user_id == user_id:
                del self._tasks[task_id]


# ==================== sqlite ====================

_CROP_COLUMNS = (
    "id",
    "name",
    "category",
    "row_spacing",
    "plant_spacing",
    "soil_ph",
    "days_to_maturity",
    "planting_depth",
    "sun_requirement",
    "water_requirement",
    "common_pests",
    "common_diseases",
    "fertilizer_schedule",
    "harvest_tips",
    "is_custom",
    "user_id",
    "created_at",
)
_FIELD_BED_COLUMNS = (
    "id",
    "user_id",
    "name",
    "type",
    "square_footage",
    "acreage",
    "irrigation_type",
    "soil_type",
    "created_at",
)
_ASSIGNMENT_COLUMNS = ("id", "field_bed_id", "crop_id", "planting_date", "created_at")
_TASK_COLUMNS = (
    "id",
    "user_id",
    "field_bed_crop_id",
    "task_type",
    "due_date",
    "completed",
    "completed_date",
    "notes",
    "weather_recommendation",
    "weather_priority",
    "created_at",
)

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS crops ("
    "id TEXT PRIMARY KEY, "
    "name TEXT NOT NULL, "
    "category TEXT NOT NULL, "
    "row_spacing TEXT, plant_spacing TEXT, soil_ph TEXT, "
    "days_to_maturity INTEGER, "
    "planting_depth TEXT, sun_requirement TEXT, water_requirement TEXT, "
    "common_pests TEXT, common_diseases TEXT, "
    "fertilizer_schedule TEXT, harvest_tips TEXT, "
    "is_custom INTEGER NOT NULL DEFAULT 0, "
    "user_id TEXT, "
    "created_at TEXT NOT NULL)",
    "CREATE INDEX IF NOT EXISTS idx_crops_user ON crops (user_id)",
    "CREATE TABLE IF NOT EXISTS fields_beds ("
    "id TEXT PRIMARY KEY, "
    "user_id TEXT NOT NULL, "
    "name TEXT NOT NULL, "
    "type TEXT NOT NULL, "
    "square_footage REAL, acreage REAL, "
    "irrigation_type TEXT, soil_type TEXT, "
    "created_at TEXT NOT NULL)",
    "CREATE INDEX IF NOT EXISTS idx_fields_beds_user ON fields_beds (user_id)",
    "CREATE TABLE IF NOT EXISTS field_bed_crops ("
    "id TEXT PRIMARY KEY, "
    "field_bed_id TEXT NOT NULL REFERENCES fields_beds (id) ON DELETE CASCADE, "
    "crop_id TEXT NOT NULL REFERENCES crops (id) ON DELETE CASCADE, "
    "planting_date TEXT NOT NULL, "
    "created_at TEXT NOT NULL)",
    "CREATE TABLE IF NOT EXISTS schedules ("
    "id TEXT PRIMARY KEY, "
    "user_id TEXT NOT NULL, "
    "field_bed_crop_id TEXT NOT NULL "
    "REFERENCES field_bed_crops (id) ON DELETE CASCADE, "
    "task_type TEXT NOT NULL, "
    "due_date TEXT NOT NULL, "
    "completed INTEGER NOT NULL DEFAULT 0, "
    "completed_date TEXT, "
    "notes TEXT, "
    "weather_recommendation TEXT, "
    "weather_priority TEXT, "
    "created_at TEXT NOT NULL)",
    "CREATE INDEX IF NOT EXISTS idx_schedules_user_due ON schedules (user_id, due_date)",
    "CREATE INDEX IF NOT EXISTS idx_schedules_assignment ON schedules (field_bed_crop_id)",
)


def _to_db(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


def _row_values(model: Any, columns: Iterable[str]) -> tuple:
    return tuple(_to_db(getattr(model, column)) for column in columns)


def _select_list(alias: str, columns: Iterable[str]) -> str:
    return ", ".join(f"{alias}.{column} AS {alias}__{column}" for column in columns)


def _extract(row: sqlite3.Row, alias: str, columns: Iterable[str]) -> Dict[str, Any]:
    return {column: row[f"{alias}__{column}"] for column in columns}


_ASSIGNMENT_SELECT = (
    f"SELECT {_select_list('a', _ASSIGNMENT_COLUMNS)}, "
    f"{_select_list('c', _CROP_COLUMNS)}, "
    f"{_select_list('f', _FIELD_BED_COLUMNS)} "
    "FROM field_bed_crops a "
    "JOIN crops c ON c.id = a.crop_id "
    "JOIN fields_beds f ON f.id = a.field_bed_id"
)


def _assignment_detail_from_row(row: sqlite3.Row) -> FieldBedCropDetail:
    return FieldBedCropDetail(
        **_extract(row, "a", _ASSIGNMENT_COLUMNS),
        crop=Crop(**_extract(row, "c", _CROP_COLUMNS)),
        field_bed=FieldBed(**_extract(row, "f", _FIELD_BED_COLUMNS)),
    )


class SqliteFarmStore(FarmStore):
    name = "sqlite"

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = Lock()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _init_db(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as conn, conn:
            for statement in _SCHEMA:
                conn.execute(statement)

    def _query(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self._lock, closing(self._connect()) as conn, conn:
            return conn.execute(sql, params).fetchall()

    def _insert(self, table: str, columns: Sequence[str], model: Any) -> None:
        placeholders = ", ".join("?" for _ in columns)
        with self._lock, closing(self._connect()) as conn, conn:
            conn.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                _row_values(model, columns),
            )

    def list_system_crops(self) -> List[Crop]:
        rows = self._query(
            f"SELECT {', '.join(_CROP_COLUMNS)} FROM crops "
            "WHERE is_custom = 0 ORDER BY rowid"
        )
        return [Crop(**dict(row)) for row in rows]

    def list_custom_crops(self, user_id: str) -> List[Crop]:
        rows = self._query(
            f"SELECT {', '.join(_CROP_COLUMNS)} FROM crops "
            "WHERE is_custom = 1 AND user_id = ? ORDER BY rowid",
            (user_id,),
        )
        return [Crop(**dict(row)) for row in rows]

    def get_crop(self, crop_id: str) -> Optional[Crop]:
        rows = self._query(
            f"SELECT {', '.join(_CROP_COLUMNS)} FROM crops WHERE id = ?",
            (crop_id,),
        )
        return Crop(**dict(rows[0])) if rows else None

    def has_system_crop(self, name: str) -> bool:
        rows = self._query(
            "SELECT 1 FROM crops WHERE name = ? AND is_custom = 0 LIMIT 1",
            (name,),
        )
        return bool(rows)

    def insert_crop(self, crop: Crop) -> Crop:
        self._insert("crops", _CROP_COLUMNS, crop)
        return crop

    def list_field_beds(self, user_id: str) -> List[FieldBedWithCrops]:
        field_rows = self._query(
            f"SELECT {', '.join(_FIELD_BED_COLUMNS)} FROM fields_beds "
            "WHERE user_id = ? ORDER BY rowid",
            (user_id,),
        )
        crop_rows = self._query(
            f"{_ASSIGNMENT_SELECT} WHERE f.user_id = ? ORDER BY a.rowid",
            (user_id,),
        )
        crops_by_field: Dict[str, List[AssignedCrop]] = {}
        for row in crop_rows:
            detail = _assignment_detail_from_row(row)
            crops_by_field.setdefault(detail.field_bed_id, []).append(
                AssignedCrop(
                    **detail.model_dump(exclude={"crop", "field_bed"}),
                    crop=detail.crop,
                )
            )
        return [
            FieldBedWithCrops(**dict(row), crops=crops_by_field.get(row["id"], []))
            for row in field_rows
        ]

    def get_field_bed(self, field_bed_id: str) -> Optional[FieldBed]:
        rows = self._query(
            f"SELECT {', '.join(_FIELD_BED_COLUMNS)} FROM fields_beds WHERE id = ?",
            (field_bed_id,),
        )
        return FieldBed(**dict(rows[0])) if rows else None

    def insert_field_bed(self, field_bed: FieldBed) -> FieldBed:
        self._insert("fields_beds", _FIELD_BED_COLUMNS, field_bed)
        return field_bed

    def delete_field_bed(self, field_bed_id: str, user_id: str) -> None:
        with self._lock, closing(self._connect()) as conn, conn:
            conn.execute(
                "DELETE FROM fields_beds WHERE id = ? AND user_id = ?",
                (field_bed_id, user_id),
            )

    def insert_field_bed_crop(self, assignment: FieldBedCrop) -> FieldBedCrop:
        self._insert("field_bed_crops", _ASSIGNMENT_COLUMNS, assignment)
        return assignment

    def get_field_bed_crop(self, field_bed_crop_id: str) -> Optional[FieldBedCropDetail]:
        rows = self._query(f"{_ASSIGNMENT_SELECT} WHERE a.id = ?", (field_bed_crop_id,))
        return _assignment_detail_from_row(rows[0]) if rows else None

    def list_schedule_tasks(self, user_id: str) -> List[ScheduleTaskDetail]:
        rows = self._query(
            f"SELECT {_select_list('s', _TASK_COLUMNS)}, "
            f"{_select_list('a', _ASSIGNMENT_COLUMNS)}, "
            f"{_select_list('c', _CROP_COLUMNS)}, "
            f"{_select_list('f', _FIELD_BED_COLUMNS)} "
            "FROM schedules s "
            "JOIN field_bed_crops a ON a.id = s.field_bed_crop_id "
            "JOIN crops c ON c.id = a.crop_id "
            "JOIN fields_beds f ON f.id = a.field_bed_id "
            "WHERE s.user_id = ? "
            "ORDER BY s.due_date, s.rowid",
            (user_id,),
        )
        return [
            ScheduleTaskDetail(
                **_extract(row, "s", _TASK_COLUMNS),
                field_bed_crop=_assignment_detail_from_row(row),
            )
            for row in rows
        ]

    def save_schedule_batch(
        self,
        user_id: str,
        field_bed_crop_id: str,
        tasks: Sequence[ScheduleTask],
        *,
        replace_existing: bool,
    ) -> List[ScheduleTask]:
        placeholders = ", ".join("?" for _ in _TASK_COLUMNS)
        # one transaction: the batch lands whole or not at all
        with self._lock, closing(self._connect()) as conn, conn:
            if replace_existing:
                conn.execute(
                    "DELETE FROM schedules WHERE user_id = ? AND field_bed_crop_id = ?",
                    (user_id, field_bed_crop_id),
                )
            conn.executemany(
                f"INSERT INTO schedules ({', '.join(_TASK_COLUMNS)}) "
                f"VALUES ({placeholders})",
                [_row_values(task, _TASK_COLUMNS) for task in tasks],
            )
        return list(tasks)

    def update_schedule_task(
        self, task_id: str, user_id: str, changes: Dict[str, Any]
    ) -> Optional[ScheduleTask]:
        changes = _check_changes(changes)
        with self._lock, closing(self._connect()) as conn, conn:
            if changes:
                assignments = ", ".join(f"{column} = ?" for column in changes)
                conn.execute(
                    f"UPDATE schedules SET {assignments} WHERE id = ? AND user_id = ?",
                    (*(_to_db(v) for v in changes.values()), task_id, user_id),
                )
            row = conn.execute(
                f"SELECT {', '.join(_TASK_COLUMNS)} FROM schedules "
                "WHERE id = ? AND user_id = ?",
                (task_id, user_id),
            ).fetchone()
        return ScheduleTask(**dict(row)) if row else None

    def delete_schedule_task(self, task_id: str, user_id: str) -> None:
        with self._lock, closing(self._connect()) as conn, conn:
            conn.execute(
                "DELETE FROM schedules WHERE id = ? AND user_id = ?",
                (task_id, user_id),
            )


def build_farm_store(cfg: Optional[AppConfig] = None) -> FarmStore:
    cfg = cfg or get_config()
    store = (cfg.farm_store or "memory").lower()
    if store == "sqlite":
        if cfg.farm_store_path:
            path = Path(cfg.farm_store_path)
        else:
            root = Path(__file__).resolve().parents[2]
            path = root / ".cache" / "smallfarm.sqlite3"
        return SqliteFarmStore(path=path)
    return MemoryFarmStore()
