import csv
import json
from pathlib import Path

from treefilter.discovery.errors import DirectoryOpenError
from treefilter.discovery.walker import WalkResult
from treefilter.logging.logger import FIELDNAMES, CSVLogger, JSONLogger
from treefilter.metadata.scanner import FileMetadata

OK = WalkResult(path=Path('root/a.txt'))
META = FileMetadata(path=Path('root/a.txt'), size_bytes=3, mtime=1.5, checksum='abc')
FAILED = WalkResult(error=DirectoryOpenError(Path('root/locked'), PermissionError(13, 'Permission denied')))


def test_csv_logger_writes_rows(tmp_path):
    path = tmp_path / 'log.csv'
    with CSVLogger(path, 'run1') as log:
        log.log_result(OK, META)
        log.log_result(FAILED)

    with path.open(newline='') as f:
        rows = list(csv.DictReader(f))

    assert tuple(rows[0]) == FIELDNAMES
    assert rows[0]['path'] == str(Path('root/a.txt'))
    assert rows[0]['size_bytes'] == '3'
    assert rows[0]['status'] == 'ok'
    assert rows[0]['error_type'] == ''
    assert rows[1]['status'] == 'error'
    assert rows[1]['error_type'] == 'DirectoryOpenError'
    assert 'Permission denied' in rows[1]['error_msg']
    assert {r['run_id'] for r in rows} == {'run1'}


def test_json_logger_writes_on_flush(tmp_path):
    path = tmp_path / 'log.json'
    log = JSONLogger(path, 'run2')
    log.log_result(OK)
    log.log_result(FAILED)
    assert not path.exists()

    log.flush()
    records = json.loads(path.read_text())

    assert [r['status'] for r in records] == ['ok', 'error']
    assert records[0]['size_bytes'] is None
    assert records[1]['path'] == str(Path('root/locked'))
