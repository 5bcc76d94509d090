# settings.py
from __future__ import annotations
import json, os, sys
from pathlib import Path
from typing import Any, Dict

_CFG = Path(os.environ.get("FILESIG_SETTINGS", Path.home() / ".filesig.json"))

DEFAULTS: Dict[str, Any] = {
    "algorithm": "md5",
    "workers": None,
    "follow_symlinks": False,
    "include_special": False,
    "file_timeout": None,
    "fail_on_errors": True,
    "ordered": False,
    "last_root": "",
}

_DATA: Dict[str, Any] = {}

def load() -> None:
    global _DATA
    _DATA = {}
    if _CFG.exists():
        try:
            data = json.loads(_CFG.read_text(encoding="utf-8"))
        except Exception:
            data = {}
        if isinstance(data, dict):
            _DATA = data

def get(key: str, default: Any = None) -> Any:
    if key in _DATA:
        return _DATA[key]
    if default is None:
        return DEFAULTS.get(key)
    return default

def set(key: str, value: Any) -> None:
    _DATA[key] = value

def save() -> None:
    try:
        _CFG.parent.mkdir(parents=True, exist_ok=True)
        _CFG.write_text(json.dumps(_DATA, indent=2, ensure_ascii=False), encoding="utf-8")
    except Exception as exc:   # nunca deixar falhar o fecho da app
        print(f"[settings] warning: {exc}", file=sys.stderr)

load()
