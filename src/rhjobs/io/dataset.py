# src/rhjobs/io/dataset.py
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import List, Union

import pandas as pd

from rhjobs.models import RECORD_FIELDS, JobRecord

PathLike = Union[str, Path]

DATASET_FILENAME = "dataset.jsonl"


class JsonlDataset:
    """
    Append-only output: one JSON object per line, one line per job.
    Existing lines are never rewritten, so re-running appends to the same file.
    """

    def __init__(self, path: PathLike):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def append(self, record: JobRecord) -> None:
        row = {key: record.get(key) for key in RECORD_FIELDS}
        line = json.dumps(row, ensure_ascii=False)
        with self._lock:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")

    def read(self) -> List[dict]:
        if not self.path.exists():
            return []
        with self.path.open(encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    def count(self) -> int:
        return len(self.read())


def export_csv(dataset_path: PathLike, csv_path: PathLike) -> int:
    """
    Convert a dataset file into a CSV with the output columns in order.
    Returns the number of rows written.
    """
    rows = JsonlDataset(dataset_path).read()
    df = pd.DataFrame(rows, columns=list(RECORD_FIELDS))
    Path(csv_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(csv_path, index=False)
    return len(df)
