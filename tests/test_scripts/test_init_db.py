"""Tests for the database maintenance CLI."""

import importlib.util
import json
from pathlib import Path

from src.core.database import session_scope
from src.portfolio.fx_rates import get_all_fx_rates_for_pair
from src.portfolio.position_sets import get_active_position_set, get_all_position_sets

_SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "init_db.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("init_db_script", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestInitDbCli:
    def test_parse_args_defaults(self):
        args = _load_script().parse_args([])
        assert args.no_demo is False
        assert args.clear_cache is False
        assert args.import_file is None
        assert args.import_fx_file is None

    def test_seeds_demo_by_default(self, db):
        assert _load_script().main([]) == 0
        with session_scope() as session:
            assert get_active_position_set(session)["name"] == "demo"

    def test_no_demo(self, db):
        assert _load_script().main(["--no-demo", "--clear-cache"]) == 0
        with session_scope() as session:
            assert get_all_position_sets(session) == []

    def test_import_file(self, db, tmp_path, sample_positions):
        path = tmp_path / "positions.json"
        path.write_text(json.dumps({"positions": sample_positions}), encoding="utf-8")
        assert _load_script().main(["--no-demo", "--import-file", str(path)]) == 0
        with session_scope() as session:
            assert get_active_position_set(session)["name"] == "user-portfolio"

    def test_missing_import_file_fails(self, db, tmp_path):
        assert _load_script().main(["--no-demo", "--import-file", str(tmp_path / "x.json")]) == 1

    def test_import_fx_file(self, db, tmp_path):
        path = tmp_path / "fxRates.json"
        path.write_text(
            json.dumps({"USDJPY": {"2024-01-04": 143.5, "2024-01-05": 144.2}}),
            encoding="utf-8",
        )
        assert _load_script().main(["--no-demo", "--import-fx-file", str(path)]) == 0
        with session_scope() as session:
            assert get_all_fx_rates_for_pair(session, "USDJPY") == {
                "2024-01-05": 144.2,
                "2024-01-04": 143.5,
            }

    def test_missing_fx_file_fails(self, db, tmp_path):
        args = ["--no-demo", "--import-fx-file", str(tmp_path / "fx.json")]
        assert _load_script().main(args) == 1
