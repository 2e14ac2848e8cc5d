# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the text input parser and output writer.
"""

import io

import pytest
from pydantic import ValidationError

from transdb.core import Account, Transfer
from transdb.io import LedgerInput, LedgerInputError, read_input, run, write_output

SAMPLE = """\
3
1 10
2 0
3 0
2
1
1 2 5
1
1 3 20
"""


class TestReadInput:
    def test_parses_accounts_and_transactions(self):
        parsed = read_input(io.StringIO(SAMPLE))

        assert isinstance(parsed, LedgerInput)
        assert parsed.accounts == [Account(1, 10), Account(2, 0), Account(3, 0)]
        assert parsed.transactions == [[Transfer(1, 2, 5)], [Transfer(1, 3, 20)]]
        assert parsed.transfer_count == 2

    def test_skips_blank_lines_and_trailing_tokens(self):
        text = "1\n\n7 3 extra\n1\n2   # two transfers\n7 7 1\n\n7 7 -1 x\n"
        parsed = read_input(io.StringIO(text))

        assert parsed.accounts == [Account(7, 3)]
        assert parsed.transactions == [[Transfer(7, 7, 1), Transfer(7, 7, -1)]]

    def test_empty_transaction(self):
        parsed = read_input(io.StringIO("1\n1 1\n1\n0\n"))

        assert parsed.transactions == [[]]

    def test_truncated_input(self):
        with pytest.raises(LedgerInputError, match="end of input while reading transfer"):
            read_input(io.StringIO("1\n1 5\n1\n2\n1 1 1\n"))

    def test_short_record(self):
        with pytest.raises(LedgerInputError, match="line 2") as excinfo:
            read_input(io.StringIO("1\n1\n"))

        assert excinfo.value.line_number == 2

    def test_non_integer(self):
        with pytest.raises(LedgerInputError, match="non-integer"):
            read_input(io.StringIO("1\n1 ten\n"))

    def test_negative_count(self):
        with pytest.raises(LedgerInputError, match="negative account count"):
            read_input(io.StringIO("-1\n"))

    def test_parsed_input_is_frozen(self):
        parsed = read_input(io.StringIO(SAMPLE))

        with pytest.raises(ValidationError):
            parsed.accounts = []
        with pytest.raises(ValidationError):
            LedgerInput(accounts=[], balances=[])

    def test_input_error_is_value_error(self):
        assert issubclass(LedgerInputError, ValueError)


class TestRunAndWrite:
    def test_run_settles(self):
        parsed = read_input(io.StringIO(SAMPLE))
        ledger = run(parsed.accounts, parsed.transactions)

        assert ledger.get_applied_transactions() == [0]
        assert ledger.pending_transaction_ids() == []

    def test_write_output(self):
        parsed = read_input(io.StringIO(SAMPLE))
        ledger = run(parsed.accounts, parsed.transactions)
        out = io.StringIO()

        write_output(ledger, out)

        assert out.getvalue() == "1\n0\n3\n1 5\n2 5\n3 0\n"

    def test_write_output_nothing_applied(self):
        ledger = run([Account(2, 1), Account(1, 0)], [[Transfer(1, 2, 4)]])
        out = io.StringIO()

        write_output(ledger, out)

        assert out.getvalue() == "0\n2\n1 0\n2 1\n"
