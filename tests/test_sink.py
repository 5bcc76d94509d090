import json
from pathlib import Path

import pytest

from filesig.core.errors import ReadError, TraversalError
from filesig.core.logger import HashLog
from filesig.core.models import Outcome, RunStatus, Task
from filesig.core.sink import ResultSink, format_outcome


def _ok(name, digest):
    return Outcome.success(Task(Path('/r') / name, Path(name)), digest)


def _fail(name, msg):
    return Outcome.failure(Task(Path('/r') / name, Path(name)), ReadError(Path('/r') / name, msg))


def test_format_outcome():
    assert format_outcome(_ok('a.txt', 'abc')) == '/r/a.txt :: abc'
    assert format_outcome(_fail('b.txt', 'Permission denied')) == '/r/b.txt: Permission denied'


def test_counts_and_routes_lines():
    lines, errors = [], []
    sink = ResultSink(Path('/r'), 'md5', log_cb=lines.append, error_cb=errors.append, collect=True)
    sink.consume(_ok('a.txt', '111'))
    sink.consume(_fail('b.txt', 'Permission denied'))
    sink.consume(_ok('c/d.txt', '222'))
    summary = sink.close(RunStatus.COMPLETED, peak_workers=2)

    assert lines == ['/r/a.txt :: 111', '/r/c/d.txt :: 222']
    assert errors == ['/r/b.txt: Permission denied']
    assert (summary.succeeded, summary.failed) == (2, 1)
    assert summary.digests == {'a.txt': '111', 'c/d.txt': '222'}
    assert [o.rel for o in summary.errors] == [Path('b.txt')]
    assert summary.peak_workers == 2
    assert not summary.ok
    assert summary.exit_code() == 1
    assert summary.exit_code(fail_on_errors=False) == 0


def test_ordered_output_sorted_by_path():
    lines = []
    sink = ResultSink(Path('/r'), 'md5', log_cb=lines.append, ordered=True)
    for name in ('z.txt', 'a.txt', 'm.txt'):
        sink.consume(_ok(name, name[0]))
    assert lines == []
    sink.close(RunStatus.COMPLETED)
    assert lines == ['/r/a.txt :: a', '/r/m.txt :: m', '/r/z.txt :: z']


def test_default_output_is_print(capsys):
    sink = ResultSink(Path('/r'), 'md5')
    sink.consume(_ok('a.txt', 'abc'))
    sink.close(RunStatus.COMPLETED)
    assert capsys.readouterr().out == '/r/a.txt :: abc\n'


def test_consume_after_close_fails():
    sink = ResultSink(Path('/r'), 'md5', log_cb=lambda _: None)
    sink.close(RunStatus.COMPLETED)
    with pytest.raises(RuntimeError):
        sink.consume(_ok('a.txt', 'x'))


def test_cancelled_summary_exit_code():
    sink = ResultSink(Path('/r'), 'md5', log_cb=lambda _: None)
    sink.consume(_ok('a.txt', 'x'))
    summary = sink.close(RunStatus.CANCELLED)
    assert summary.cancelled
    assert summary.exit_code() == 130


def test_hash_log_written(tmp_path):
    log = HashLog(Path('/r'), tmp_path / 'logs', 'sha256')
    sink = ResultSink(Path('/r'), 'sha256', log_cb=lambda _: None, run_log=log)
    sink.consume(_ok('a.txt', 'abc'))
    trav = Outcome(Path('/r/x'), Path('x'), error=TraversalError('/r/x', 'Permission denied'))
    sink.consume(trav)
    summary = sink.close(RunStatus.COMPLETED)
    path = log.close(summary)

    assert path.parent == tmp_path / 'logs'
    data = json.loads(path.read_text(encoding='utf-8'))
    assert data['algorithm'] == 'sha256'
    assert data['status'] == 'completed'
    assert data['succeeded'] == 1
    assert data['failed'] == 1
    assert data['files'] == [{'path': '/r/a.txt', 'digest': 'abc'}]
    assert data['errors'] == [{'path': '/r/x', 'error': 'Permission denied', 'kind': 'traversal'}]
