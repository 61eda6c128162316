import json
import os
import sys

import pytest

from vendsim import main as cli
from vendsim.script.driver import ScriptDriver, run_script
from vendsim.simulation.engine import VendingMachineEngine
from vendsim.utils.helpers import append_script_results, summarize_delivery

SCRIPTS_DIR = os.path.join(os.path.dirname(__file__), "..", "data", "scripts")


@pytest.fixture
def driver():
    return ScriptDriver(VendingMachineEngine(verbose=False))


def test_good_sample_script_passes():
    result = run_script(os.path.join(SCRIPTS_DIR, "good-script"))
    assert result.error is None
    assert result.failed_checks == []
    assert result.checks_passed == 4
    assert result.passed


@pytest.mark.parametrize("name", ["bad-script1", "bad-script2"])
def test_bad_sample_scripts_stop_with_an_error(name):
    result = run_script(os.path.join(SCRIPTS_DIR, name))
    assert result.error is not None
    assert result.commands_executed == 0
    assert not result.passed


def test_cola_script(driver):
    result = driver.run_text("""
        construct(1, 5, 10; 1)
        configure("Cola"; 15)
        load(3, 0, 0; 1)
        insert(10) insert(10) press(0)
        extract()
        CHECK_DELIVERY(3, "Cola")
        unload()
        CHECK_TEARDOWN(0; 20)
    """)
    assert result.passed
    assert result.commands_executed == 10
    assert driver.last_delivery == [1, 1, 1, "Cola"]


def test_failed_check_is_recorded_and_script_continues(driver):
    result = driver.run_text("""
        construct(5; 1)
        insert(3)
        extract()
        CHECK_DELIVERY(4)
        CHECK_DELIVERY(3)
        CHECK_TEARDOWN(0; 0; "Coke")
    """)
    assert result.error is None
    assert result.checks_passed == 1
    assert len(result.failed_checks) == 2
    assert "line 5" in result.failed_checks[0]
    assert result.commands_executed == 6


def test_delivery_pops_compare_as_multiset(driver):
    result = driver.run_text("""
        construct(5; 2)
        configure("A", "B"; 5, 5)
        load(0; 1, 1)
        insert(5) press(1) insert(5) press(0)
        extract()
        CHECK_DELIVERY(0, "A", "B")
    """)
    assert result.passed


def test_engine_error_stops_script(driver):
    result = driver.run_text("""
        construct(5; 1)
        press(1)
        CHECK_DELIVERY(0)
    """)
    assert "line 3" in result.error
    assert result.commands_executed == 1
    assert result.checks_passed == 0


def test_parse_error_is_reported(driver):
    result = driver.run_text("construct(5; 1) insert()")
    assert result.error.startswith("Parse error")
    assert result.commands_executed == 0


def test_each_run_starts_without_machine(driver):
    assert driver.run_text("construct(5; 1)").passed
    result = driver.run_text("insert(5)")
    assert "before the first construct" in result.error


def test_debug_echoes_commands(capsys):
    driver = ScriptDriver(VendingMachineEngine(verbose=False), debug=True)
    driver.run_text("construct(5; 1)\nextract()")
    out = capsys.readouterr().out
    assert "[Script Driver] line 1: construct(5; 1)" in out
    assert "[Script Driver] line 2: extract()" in out


def test_summarize_delivery():
    assert summarize_delivery([5, 10, "Coke", "Water"]) == (15, ["Coke", "Water"])
    assert summarize_delivery([]) == (0, [])


def test_append_script_results_writes_header_once(driver, tmp_path):
    csv_path = tmp_path / "results" / "history.csv"
    result = driver.run_text("construct(5; 1)")
    append_script_results([result], str(csv_path))
    append_script_results([result], str(csv_path))
    lines = csv_path.read_text().splitlines()
    assert lines[0].startswith("timestamp,path,passed")
    assert len(lines) == 3


def test_teardown_check_before_any_unload_fails(driver):
    result = driver.run_text("""
        construct(5; 1)
        configure("Coke"; 5)
        load(2; 1)
        CHECK_TEARDOWN(0; 0)
        unload()
        CHECK_TEARDOWN(10; 0; "Coke")
    """)
    assert result.error is None
    assert result.checks_passed == 1
    assert len(result.failed_checks) == 1
    assert "nothing has been unloaded yet" in result.failed_checks[0]


# --- command line ---

def test_cli_json_output_stays_json_with_csv(monkeypatch, capsys, tmp_path):
    csv_path = tmp_path / "history.csv"
    monkeypatch.setattr(cli, "SCRIPT_RESULTS_CSV", str(csv_path))
    monkeypatch.setattr(sys, "argv", [
        "vendsim-scripts", os.path.join(SCRIPTS_DIR, "good-script"), "--csv", "--json-output",
    ])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 0

    output = json.loads(capsys.readouterr().out)
    assert len(output) == 1
    assert output[0]["passed"] is True
    assert output[0]["checks_passed"] == 4
    assert len(csv_path.read_text().splitlines()) == 2


def test_cli_exits_non_zero_when_a_script_fails(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", [
        "vendsim-scripts", os.path.join(SCRIPTS_DIR, "bad-script1"), "--quiet",
    ])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 1
    assert "FAILED" in capsys.readouterr().out
