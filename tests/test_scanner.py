import os
from pathlib import Path

import pytest

from filesig.core.errors import ConfigurationError
from filesig.core.models import Outcome, Task
from filesig.core.scanner import Scanner, scan


def test_scan_recursive_only_files(tmp_path):
    (tmp_path / 'a.jpg').write_text('jpg')
    (tmp_path / 'a.txt').write_text('txt')
    sub = tmp_path / 'sub'
    sub.mkdir()
    (sub / 'b.jpg').write_text('jpg')
    (tmp_path / 'vazia').mkdir()

    found = list(scan(tmp_path))
    assert all(isinstance(t, Task) for t in found)
    rel = {t.rel for t in found}
    assert rel == {Path('a.jpg'), Path('a.txt'), Path('sub/b.jpg')}
    for t in found:
        assert t.path.is_absolute()
        assert t.path.read_text() in ('jpg', 'txt')


def test_scan_empty_dir(tmp_path):
    assert list(scan(tmp_path)) == []


def test_scan_is_lazy(tmp_path):
    for i in range(5):
        (tmp_path / f'{i}.txt').write_text(str(i))
    gen = Scanner(tmp_path).scan()
    first = next(gen)
    assert first.rel == Path('0.txt')


def test_scan_missing_root():
    missing = Path('nao_existe')
    with pytest.raises(ConfigurationError):
        scan(missing)


def test_scan_root_is_file(tmp_path):
    f = tmp_path / 'ficheiro.txt'
    f.write_text('x')
    with pytest.raises(ConfigurationError):
        Scanner(f)


def test_scan_unreadable_root(tmp_path, monkeypatch):
    real_scandir = os.scandir

    def fake_scandir(path='.'):
        if Path(path) == tmp_path:
            raise PermissionError(13, 'Permission denied', str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, 'scandir', fake_scandir)
    with pytest.raises(ConfigurationError):
        Scanner(tmp_path)


def test_scan_traversal_error_does_not_abort(tmp_path, monkeypatch):
    (tmp_path / 'a.txt').write_text('a')
    locked = tmp_path / 'locked'
    locked.mkdir()
    (locked / 'secret.txt').write_text('s')
    other = tmp_path / 'other'
    other.mkdir()
    (other / 'b.txt').write_text('b')

    real_iterdir = Path.iterdir

    def fake_iterdir(self):
        if self.name == 'locked':
            raise PermissionError(13, 'Permission denied', str(self))
        return real_iterdir(self)

    monkeypatch.setattr(Path, 'iterdir', fake_iterdir)

    items = list(scan(tmp_path))
    tasks = {i.rel for i in items if isinstance(i, Task)}
    failures = [i for i in items if isinstance(i, Outcome)]

    assert tasks == {Path('a.txt'), Path('other/b.txt')}
    assert len(failures) == 1
    assert failures[0].rel == Path('locked')
    assert failures[0].kind == 'traversal'
    assert 'Permission denied' in str(failures[0].error)


@pytest.mark.skipif(not hasattr(os, 'symlink'), reason='sem symlinks')
def test_scan_skips_symlinks_by_default(tmp_path):
    (tmp_path / 'real.txt').write_text('x')
    target = tmp_path / 'dir'
    target.mkdir()
    (target / 'inner.txt').write_text('y')
    os.symlink(tmp_path / 'real.txt', tmp_path / 'link.txt')
    os.symlink(target, tmp_path / 'linkdir')

    rel = {t.rel for t in scan(tmp_path)}
    assert rel == {Path('real.txt'), Path('dir/inner.txt')}

    followed = {t.rel for t in scan(tmp_path, follow_symlinks=True)}
    assert Path('link.txt') in followed
    # a pasta apontada pela ligação já foi visitada: não é percorrida duas vezes
    assert len([r for r in followed if r.name == 'inner.txt']) == 1


@pytest.mark.skipif(not hasattr(os, 'symlink'), reason='sem symlinks')
def test_scan_symlink_loop_terminates(tmp_path):
    sub = tmp_path / 'sub'
    sub.mkdir()
    (sub / 'f.txt').write_text('f')
    os.symlink(tmp_path, sub / 'loop')

    rel = {t.rel for t in scan(tmp_path, follow_symlinks=True)}
    assert rel == {Path('sub/f.txt')}


@pytest.mark.skipif(not hasattr(os, 'mkfifo'), reason='sem fifos')
def test_scan_skips_special_files(tmp_path):
    (tmp_path / 'a.txt').write_text('a')
    os.mkfifo(tmp_path / 'pipe')

    assert {t.rel for t in scan(tmp_path)} == {Path('a.txt')}
    assert {t.rel for t in scan(tmp_path, include_special=True)} == {Path('a.txt'), Path('pipe')}


def test_scan_stat_error_is_reported(tmp_path, monkeypatch):
    noexec = tmp_path / 'noexec'
    noexec.mkdir()
    (noexec / 'a.txt').write_text('a')
    (tmp_path / 'b.txt').write_text('b')

    real_stat = Path.stat

    def fake_stat(self, *args, **kwargs):
        if self.parent.name == 'noexec':
            raise PermissionError(13, 'Permission denied', str(self))
        return real_stat(self, *args, **kwargs)

    monkeypatch.setattr(Path, 'stat', fake_stat)

    items = list(Scanner(tmp_path).scan())
    tasks = {i.rel for i in items if isinstance(i, Task)}
    failures = [i for i in items if isinstance(i, Outcome)]

    assert tasks == {Path('b.txt')}
    assert len(failures) == 1
    assert failures[0].rel == Path('noexec/a.txt')
    assert failures[0].kind == 'traversal'
    assert 'Permission denied' in str(failures[0].error)


@pytest.mark.skipif(not hasattr(os, 'symlink'), reason='sem symlinks')
def test_scan_broken_symlink_is_skipped(tmp_path):
    (tmp_path / 'a.txt').write_text('a')
    os.symlink(tmp_path / 'nao_existe', tmp_path / 'quebrada')

    assert list(scan(tmp_path, follow_symlinks=True)) == [Task(tmp_path / 'a.txt', Path('a.txt'))]
