# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the command-line entry point.
"""

import io

from transdb.cli import build_parser, main

INPUT = "2\n1 5\n2 5\n2\n1\n1 2 10\n1\n2 1 3\n"


class TestCli:
    def test_parser_defaults(self):
        args = build_parser().parse_args([])

        assert args.input == "-"
        assert args.output == "-"
        assert args.duplicates == "last"

    def test_file_to_file(self, tmp_path):
        src = tmp_path / "input.txt"
        dst = tmp_path / "out.txt"
        src.write_text(INPUT)

        assert main([str(src), "-o", str(dst)]) == 0
        assert dst.read_text() == "1\n1\n2\n1 8\n2 2\n"

    def test_stdin_to_stdout(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(INPUT))

        assert main([]) == 0
        assert capsys.readouterr().out == "1\n1\n2\n1 8\n2 2\n"

    def test_malformed_input(self, tmp_path, capsys):
        src = tmp_path / "bad.txt"
        src.write_text("2\n1 5\n")

        assert main([str(src)]) == 2
        assert "end of input" in capsys.readouterr().err

    def test_duplicate_reject(self, tmp_path, capsys):
        src = tmp_path / "dup.txt"
        src.write_text("2\n1 5\n1 6\n0\n")

        assert main([str(src), "--duplicates", "reject"]) == 2
        assert "Account 1" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.txt")]) == 1
        assert "transdb:" in capsys.readouterr().err
