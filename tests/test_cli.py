import argparse
import io
import json

import pytest
import yaml

from evm_stepper.cli import DEFAULT_GAS_LIMIT, build_parser, main, non_negative_int


def run_cli(capsys, *argv):
    exit_code = main(list(argv))
    return exit_code, capsys.readouterr().out


def test_run_hex_program(capsys):
    exit_code, out = run_cli(capsys, "run", "--code", "0x6001600201")
    state = json.loads(out)

    assert exit_code == 0
    assert state["stack"] == ["0x3"]
    assert state["finished"] is True
    assert state["gas"] == {"limit": DEFAULT_GAS_LIMIT, "used": 9, "left": DEFAULT_GAS_LIMIT - 9}


def test_run_assembly_file(capsys, tmp_path):
    source = tmp_path / "program.asm"
    source.write_text("PUSH1 42\nPUSH1 1\nSSTORE\n")

    exit_code, out = run_cli(capsys, "run", "--asm", str(source), "--gas-limit", "30000")
    state = json.loads(out)

    assert exit_code == 0
    assert state["storage"] == {"0x1": "0x2a"}
    assert state["warm_slots"] == ["0x1"]


def test_run_assembly_from_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("PUSH1 5\nPUSH1 7\nMUL\n"))
    exit_code, out = run_cli(capsys, "run", "--asm", "-", "--format", "yaml")

    assert exit_code == 0
    assert yaml.safe_load(out)["stack"] == ["0x23"]


def test_run_writes_output_file(capsys, tmp_path):
    target = tmp_path / "state.json"
    exit_code, out = run_cli(capsys, "run", "--code", "0x6001", "--output", str(target))

    assert exit_code == 0
    assert out == ""
    assert json.loads(target.read_text())["stack"] == ["0x1"]


def test_run_max_steps(capsys):
    exit_code, out = run_cli(capsys, "run", "--code", "0x6001600201", "--max-steps", "2")
    state = json.loads(out)

    assert exit_code == 0
    assert state["finished"] is False
    assert state["stack"] == ["0x1", "0x2"]
    assert state["next_instruction"] == "ADD"


def test_failing_step_still_prints_state(capsys):
    exit_code, out = run_cli(capsys, "run", "--code", "0x600100")
    state = json.loads(out)

    assert exit_code == 1
    assert state["program_counter"] == 2
    assert state["stack"] == ["0x1"]


def test_out_of_gas_exit_code(capsys):
    exit_code, out = run_cli(capsys, "run", "--code", "0x6001600201", "--gas-limit", "8")

    assert exit_code == 1
    assert json.loads(out)["gas"]["used"] == 6


@pytest.mark.parametrize("code", ["0xzz", "0x0c", "0x61"])
def test_bad_bytecode_returns_2(capsys, code):
    exit_code, out = run_cli(capsys, "run", "--code", code)
    assert exit_code == 2
    assert out == ""


def test_missing_assembly_file_returns_2(capsys, tmp_path):
    exit_code, _ = run_cli(capsys, "run", "--asm", str(tmp_path / "missing.asm"))
    assert exit_code == 2


def test_random_is_reproducible(capsys):
    _, first = run_cli(capsys, "random", "--count", "5", "--seed", "11")
    _, second = run_cli(capsys, "random", "--count", "5", "--seed", "11")

    assert first == second
    assert len(first.splitlines()) == 5


def test_disasm(capsys):
    exit_code, out = run_cli(capsys, "disasm", "--code", "0x61010201")
    assert exit_code == 0
    assert out.splitlines() == ["0000: PUSH2 0x0102", "0003: ADD"]


def test_disasm_bad_input(capsys):
    exit_code, out = run_cli(capsys, "disasm", "--code", "0x0c")
    assert exit_code == 2
    assert out == ""


def test_environment_defaults(monkeypatch):
    monkeypatch.setenv("EVM_STEPPER_GAS_LIMIT", "0x100")
    monkeypatch.setenv("EVM_STEPPER_MAX_STEPS", "3")
    monkeypatch.setenv("EVM_STEPPER_FORMAT", "yaml")

    args = build_parser().parse_args(["run", "--code", "0x00"])

    assert args.gas_limit == 256
    assert args.max_steps == 3
    assert args.format == "yaml"


def test_command_is_required():
    with pytest.raises(SystemExit):
        main([])


def test_negative_gas_limit_option_is_rejected(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["run", "--code", "0x6001", "--gas-limit", "-1"])
    assert excinfo.value.code == 2
    assert "must be non-negative" in capsys.readouterr().err


def test_negative_gas_limit_from_environment_returns_2(capsys, monkeypatch):
    monkeypatch.setenv("EVM_STEPPER_GAS_LIMIT", "-5")
    exit_code, out = run_cli(capsys, "run", "--code", "0x6001")
    assert exit_code == 2
    assert out == ""


def test_non_negative_int():
    assert non_negative_int("0") == 0
    assert non_negative_int("0x10") == 16
    with pytest.raises(argparse.ArgumentTypeError):
        non_negative_int("-3")
    with pytest.raises(argparse.ArgumentTypeError):
        non_negative_int("ten")
