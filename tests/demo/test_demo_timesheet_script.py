"""Smoke tests for scripts/demo_timesheet.py against the bundled store."""

import importlib.util
import sys
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "demo_timesheet.py"


@pytest.fixture
def demo():
    spec = importlib.util.spec_from_file_location("demo_timesheet", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(demo, monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["demo_timesheet.py", *argv])
    return demo.main()


class TestDemoTimesheet:

    def test_default_project(self, demo, monkeypatch, capsys):
        assert _run(demo, monkeypatch) == 0
        out = capsys.readouterr().out
        assert "DOWNTOWN OFFICE RENOVATION" in out
        assert "Apr 01 - Apr 14, 2024" in out
        assert "Sipho Ndlovu" in out
        assert "Install Main Panel" in out
        assert "[OK] All tasks within budget" in out
        assert "Total Labor Cost for Invoice: R 3,700.00" in out

    def test_other_window(self, demo, monkeypatch, capsys):
        assert _run(demo, monkeypatch, "--project", "3", "--start", "2024-07-01") == 0
        out = capsys.readouterr().out
        assert "Excavate Site" in out
        assert "Jul 01 - Jul 14, 2024" in out

    def test_unknown_project(self, demo, monkeypatch, capsys):
        assert _run(demo, monkeypatch, "--project", "42") == 1
        assert "Project not found: 42" in capsys.readouterr().err

    def test_project_cost_section(self, demo, monkeypatch, capsys):
        assert _run(demo, monkeypatch) == 0
        out = capsys.readouterr().out
        assert "PROJECT COST" in out
        assert "R 125,000.50" in out
        assert "R 9,200.00" in out
        assert "R -116,400.50" in out

    @pytest.mark.parametrize("content", ["config_id: x\nversion: abc\n", "- a\n- b\n"])
    def test_invalid_config_reported(self, demo, monkeypatch, capsys, tmp_path, content):
        config = tmp_path / "config.yaml"
        config.write_text(content)
        assert _run(demo, monkeypatch, "--config", str(config)) == 1
        assert "Configuration validation failed" in capsys.readouterr().err
