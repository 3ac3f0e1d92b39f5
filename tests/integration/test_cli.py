"""
Integration tests for the qubitsim command-line interface.
"""

import json

import pytest

from qubitsim import Circuit, __version__
from qubitsim.cli import main
from qubitsim.io.formats import save_circuit


@pytest.fixture
def bell_file(tmp_path):
    path = tmp_path / "bell.json"
    save_circuit(Circuit(2, name="bell").h(0).cx(0, 1).measure_all(), path)
    return path


class TestRunCommand:
    """Tests for `qubitsim run`."""

    def test_run_prints_counts(self, bell_file, capsys):
        exit_code = main(["run", str(bell_file), "--shots", "500", "--seed", "42"])
        output = json.loads(capsys.readouterr().out)

        assert exit_code == 0
        assert output["circuit"] == "bell"
        assert output["shots"] == 500
        assert output["seed"] == 42
        assert sum(output["counts"].values()) == 500
        assert set(output["counts"]) <= {"00", "11"}
        assert sum(output["probabilities"].values()) == pytest.approx(1.0)

    def test_run_is_reproducible(self, bell_file, capsys):
        main(["run", str(bell_file), "--shots", "200", "--seed", "7"])
        first = json.loads(capsys.readouterr().out)["counts"]
        main(["run", str(bell_file), "--shots", "200", "--seed", "7"])
        second = json.loads(capsys.readouterr().out)["counts"]

        assert first == second

    def test_run_with_statevector_and_profile(self, bell_file, capsys):
        exit_code = main([
            "run", str(bell_file), "--shots", "10", "--seed", "1",
            "--statevector", "--profile",
        ])
        output = json.loads(capsys.readouterr().out)

        assert exit_code == 0
        rows = {row["bitstring"]: row for row in output["statevector"]}
        assert rows["00"]["real"] == pytest.approx(2 ** -0.5)
        assert rows["11"]["real"] == pytest.approx(2 ** -0.5)
        assert rows["01"]["real"] == pytest.approx(0.0)
        assert "wall_time_seconds" in output["performance"]

    def test_default_shots_from_config(self, bell_file, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("simulation:\n  default_shots: 64\n  seed: 5\n")

        exit_code = main(["--config", str(config), "run", str(bell_file)])
        output = json.loads(capsys.readouterr().out)

        assert exit_code == 0
        assert output["shots"] == 64
        assert output["seed"] == 5

    def test_negative_shots_is_usage_error(self, bell_file):
        assert main(["run", str(bell_file), "--shots", "-1"]) == 2

    def test_negative_seed_is_usage_error(self, bell_file):
        assert main(["run", str(bell_file), "--seed", "-1"]) == 2
        assert main(["verify", "--seed", "-1"]) == 2

    def test_missing_file_is_usage_error(self, tmp_path):
        assert main(["run", str(tmp_path / "missing.json")]) == 2

    def test_invalid_circuit_is_usage_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"num_qubits": 1, "gates": [{"gate": "cx", "qubits": [0, 1]}]}))

        assert main(["run", str(path)]) == 2

    def test_invalid_config_is_usage_error(self, bell_file, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("simulation:\n  max_qubits: 99\n")

        assert main(["--config", str(config), "run", str(bell_file)]) == 2


class TestOtherCommands:
    """Tests for verify, gates and version."""

    def test_verify_passes(self, capsys):
        exit_code = main(["verify", "--shots", "2000", "--seed", "42"])
        out = capsys.readouterr().out

        assert exit_code == 0
        assert "ALL CHECKS PASSED" in out

    def test_verify_impossible_tolerance_fails(self, capsys):
        exit_code = main(["verify", "--shots", "1000", "--seed", "42", "--tolerance", "1e-30"])
        out = capsys.readouterr().out

        assert exit_code == 1
        assert "VERIFICATION FAILED" in out

    def test_gates_lists_catalog(self, capsys):
        assert main(["gates"]) == 0
        out = capsys.readouterr().out

        for name in ("h", "rx", "cx", "ccx", "cswap", "barrier"):
            assert f"\n{name} " in out

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert capsys.readouterr().out.strip() == f"qubitsim {__version__}"

    def test_missing_command_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2
