import runpy
import sys
from pathlib import Path

import Jellyfin_Source
from Jellyfin_Source import plugin_main

LAUNCHER = Path(Jellyfin_Source.__file__).resolve().parent / "run_plugin.py"


def test_launcher_puts_package_parent_on_path(monkeypatch):
    parent = str(LAUNCHER.parent.parent)
    monkeypatch.setattr(sys, "path", [p for p in sys.path if p != parent])

    namespace = runpy.run_path(str(LAUNCHER), run_name="launcher")

    assert sys.path[0] == parent
    assert namespace["main"] is plugin_main.main


def test_launcher_does_not_duplicate_path_entry(monkeypatch):
    parent = str(LAUNCHER.parent.parent)
    monkeypatch.setattr(sys, "path", [parent] + [p for p in sys.path if p != parent])

    runpy.run_path(str(LAUNCHER), run_name="launcher")

    assert sys.path.count(parent) == 1
