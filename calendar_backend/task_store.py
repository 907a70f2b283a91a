"""
JSON-file task provider for CRM Calendar.

Reads the CRM data export ({"companies": [...], "tasks": [...]}) and serves
the calendar engine's collaborators: the task snapshot, the company name
lookup and completion toggling.
"""

import json
import os
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .log import debug_print
from .models import Company, Task


def _debug_print(message: str) -> None:
    debug_print("STORE", message)


class TaskStoreError(Exception):
    """The data file exists but cannot be read as CRM JSON."""


class TaskStore:
    """
    Tasks and companies loaded from a JSON file.

    Task order follows the file. Records that cannot be parsed are skipped.
    """

    def __init__(self, data_file: Path):
        self.data_file = Path(data_file)
        self._tasks: list[Task] = []
        self._companies: dict[str, Company] = {}
        self._extra: dict = {}
        self._raw_companies: list = []
        self._raw_tasks: list = []
        self._on_change_callback: Optional[Callable[[], None]] = None

    def set_on_change_callback(self, callback: Callable[[], None]) -> None:
        self._on_change_callback = callback

    def _notify_change(self) -> None:
        if self._on_change_callback:
            self._on_change_callback()

    # ==================== Loading / saving ====================

    def _records(self, data: dict, key: str) -> list:
        """The record list under key; null or absent means empty."""
        records = data.get(key) or []
        if not isinstance(records, list):
            raise TaskStoreError(f"{self.data_file}: '{key}' is not a list")
        return records

    def load(self) -> int:
        """
        Load the data file. A missing file gives an empty store.

        Records that cannot be parsed are left out of the calendar but kept
        verbatim, so saving never drops them.

        Returns:
            Number of tasks loaded.
        """
        if not self.data_file.exists():
            _debug_print(f"No data file at {self.data_file}, starting empty")
            self._tasks = []
            self._companies = {}
            self._extra = {}
            self._raw_companies = []
            self._raw_tasks = []
            return 0

        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TaskStoreError(f"Cannot read {self.data_file}: {e}") from e

        if not isinstance(data, dict):
            raise TaskStoreError(f"{self.data_file} does not contain a JSON object")

        raw_companies = self._records(data, "companies")
        raw_tasks = self._records(data, "tasks")

        companies: dict[str, Company] = {}
        for company_data in raw_companies:
            try:
                company = Company.from_dict(company_data)
                companies[company.id] = company
            except (KeyError, TypeError, AttributeError) as e:
                _debug_print(f"Skipping company record: {e!r}")

        tasks: list[Task] = []
        for task_data in raw_tasks:
            try:
                tasks.append(Task.from_dict(task_data))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                _debug_print(f"Skipping task record: {e!r}")

        # Everything else in the export is kept so saving does not drop it
        self._extra = {k: v for k, v in data.items() if k not in ("companies", "tasks")}
        self._raw_companies = raw_companies
        self._raw_tasks = raw_tasks
        self._companies = companies
        self._tasks = tasks
        _debug_print(f"Loaded {len(tasks)} tasks, {len(companies)} companies from {self.data_file}")
        return len(tasks)

    def reload(self) -> None:
        """Re-read the data file and notify listeners."""
        self.load()
        self._notify_change()

    def save(self) -> bool:
        """Write the records back to the data file. Returns False on failure."""
        data = dict(self._extra)
        data["companies"] = self._raw_companies
        data["tasks"] = self._raw_tasks
        data["updated"] = datetime.now().isoformat()

        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_file = self.data_file.with_suffix(self.data_file.suffix + ".tmp")
            with open(tmp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_file, self.data_file)
            _debug_print(f"Saved {len(self._raw_tasks)} task records to {self.data_file}")
            return True
        except OSError as e:
            _debug_print(f"Error saving tasks to {self.data_file}: {e}")
            return False

    # ==================== Queries ====================

    def get_tasks(self) -> list[Task]:
        """Snapshot of all tasks in file order."""
        return list(self._tasks)

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def get_company(self, company_id: str) -> Optional[Company]:
        return self._companies.get(company_id)

    def get_company_name(self, company_id: str) -> Optional[str]:
        company = self._companies.get(company_id)
        return company.name if company else None

    # ==================== Updates ====================

    def _raw_task(self, task_id: str) -> Optional[dict]:
        for record in self._raw_tasks:
            if isinstance(record, dict) and str(record.get("id")) == task_id:
                return record
        return None

    def toggle_task(self, task_id: str) -> bool:
        """
        Flip the completion flag of a task and persist it.

        Only the completion key of the task's own record changes; every
        other key and record is written back as read.

        Returns:
            The new completion state, or False if the task does not exist.

        Raises:
            TaskStoreError: the data file could not be written. The toggle
                is undone.
        """
        for i, task in enumerate(self._tasks):
            if task.id != task_id:
                continue
            updated = replace(task, is_completed=not task.is_completed)
            record = self._raw_task(task_id)
            original = dict(record) if record is not None else None
            if record is not None:
                key = "is_completed" if "is_completed" in record and "isCompleted" not in record else "isCompleted"
                record[key] = updated.is_completed

            self._tasks[i] = updated
            if not self.save():
                self._tasks[i] = task
                if record is not None:
                    record.clear()
                    record.update(original)
                raise TaskStoreError(f"Cannot save {self.data_file}")
            self._notify_change()
            return updated.is_completed
        _debug_print(f"Toggle requested for unknown task {task_id}")
        return False
