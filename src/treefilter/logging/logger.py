"""Result logs for TreeFilter.

Writes walk results to CSV or JSON.  ``CSVLogger`` writes each record
immediately so a partial log survives an interrupted scan, while
``JSONLogger`` keeps records in a list and writes them when flushed.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..discovery.walker import WalkResult
from ..metadata.scanner import FileMetadata

FIELDNAMES = (
    'run_id',
    'path',
    'size_bytes',
    'mtime_unix',
    'checksum',
    'status',
    'error_type',
    'error_msg',
)


def result_record(result: WalkResult, run_id: str, meta: Optional[FileMetadata] = None) -> Dict[str, Any]:
    """Flatten a walk result (and its metadata, if collected) into a record."""
    if result.ok:
        return {
            'run_id': run_id,
            'path': str(result.path),
            'size_bytes': meta.size_bytes if meta else None,
            'mtime_unix': meta.mtime if meta else None,
            'checksum': meta.checksum if meta else None,
            'status': 'ok',
            'error_type': None,
            'error_msg': None,
        }
    return {
        'run_id': run_id,
        'path': str(result.error.path),
        'size_bytes': None,
        'mtime_unix': None,
        'checksum': None,
        'status': 'error',
        'error_type': type(result.error).__name__,
        'error_msg': str(result.error.cause),
    }


class CSVLogger:
    def __init__(self, path: Path, run_id: str):
        self.path = path
        self.run_id = run_id
        self.file = path.open('w', newline='', encoding='utf-8')
        self.writer = csv.DictWriter(self.file, fieldnames=FIELDNAMES)
        self.writer.writeheader()

    def log_result(self, result: WalkResult, meta: Optional[FileMetadata] = None) -> None:
        record = result_record(result, self.run_id, meta)
        self.writer.writerow({k: '' if v is None else v for k, v in record.items()})
        self.file.flush()

    def close(self) -> None:
        self.file.close()

    def __enter__(self) -> 'CSVLogger':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class JSONLogger:
    def __init__(self, path: Path, run_id: str):
        self.path = path
        self.run_id = run_id
        self.records: List[Dict[str, Any]] = []

    def log_result(self, result: WalkResult, meta: Optional[FileMetadata] = None) -> None:
        self.records.append(result_record(result, self.run_id, meta))

    def flush(self) -> None:
        with self.path.open('w', encoding='utf-8') as f:
            json.dump(self.records, f, indent=2)
