"""Tests for the command-line interface."""

import json

import pytest

from tango.cli import main


SOLUTION = (
    "SSMSMM"
    "MMSMSS"
    "SMSMSM"
    "MSMSMS"
    "SMMSSM"
    "MSSMMS"
)


class TestCli:
    """Tests for the tango command."""

    def test_no_command(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1

    def test_generate_to_file(self, tmp_path, capsys):
        output = tmp_path / "puzzles.json"
        main(["generate", "--size", "4", "--seed", "3", "-d", "easy", "-n", "2", "-o", str(output)])

        with open(output) as f:
            puzzles = json.load(f)
        assert len(puzzles) == 2
        assert puzzles[0]["size"] == 4
        assert puzzles[0]["difficulty"] == "easy"
        assert "Total puzzles generated: 2" in capsys.readouterr().out

    def test_check_valid_board(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["check", "-p", SOLUTION])
        assert excinfo.value.code == 0
        out = capsys.readouterr().out
        assert "Valid:  yes" in out
        assert "Solved: yes" in out

    def test_check_broken_board(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["check", "-p", "SSS." + "." * 12])
        assert excinfo.value.code == 1

    def test_check_with_constraints(self, capsys):
        # The first two cells are equal, so a NOT_EQUAL edge between them fails
        with pytest.raises(SystemExit) as excinfo:
            main(["check", "-p", SOLUTION, "--horizontal", "x..../...../...../...../...../....."])
        assert excinfo.value.code == 1
        assert "Valid:  no" in capsys.readouterr().out

    def test_bad_puzzle_string(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["check", "-p", "SSQ"])
        assert excinfo.value.code == 1
        assert "Error parsing puzzle" in capsys.readouterr().out

    def test_solve(self, capsys):
        puzzle = "." + SOLUTION[1:20] + "." + SOLUTION[21:]
        main(["solve", "-p", puzzle, "-a", "all"])
        out = capsys.readouterr().out
        assert out.count("Solved in") == 2

    def test_logic_reports_contradiction(self, capsys):
        """S S followed by an EQUAL edge forces a third sun."""
        main(["solve", "-a", "logic", "-p", "SS" + "." * 34,
              "--horizontal", ".=.../...../...../...../...../....."])
        out = capsys.readouterr().out
        assert "Failed to solve" in out
        assert "contradiction" in out
        assert "got stuck" not in out

    def test_logic_reports_stuck(self, capsys):
        main(["solve", "-a", "logic", "-p", "." * 36])
        out = capsys.readouterr().out
        assert "got stuck" in out
        assert "contradiction" not in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
