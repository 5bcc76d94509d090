import json

from filesig import settings


def test_defaults_and_roundtrip(tmp_path, monkeypatch):
    cfg = tmp_path / 'filesig.json'
    monkeypatch.setattr(settings, '_CFG', cfg)
    settings.load()

    assert settings.get('algorithm') == 'md5'
    assert settings.get('fail_on_errors') is True
    assert settings.get('last_root', '') == ''

    settings.set('algorithm', 'sha256')
    settings.set('workers', 3)
    settings.save()

    assert json.loads(cfg.read_text(encoding='utf-8')) == {'algorithm': 'sha256', 'workers': 3}
    settings.load()
    assert settings.get('algorithm') == 'sha256'
    assert settings.get('workers') == 3


def test_broken_file_ignored(tmp_path, monkeypatch):
    cfg = tmp_path / 'filesig.json'
    cfg.write_text('{ isto não é json', encoding='utf-8')
    monkeypatch.setattr(settings, '_CFG', cfg)
    settings.load()
    assert settings.get('algorithm') == 'md5'
