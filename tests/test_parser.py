# =============================================================================
# test_parser.py - Assembler Pass Tests
# =============================================================================
# Tests for the source reader, pass 1 (labels) and pass 2 (classification,
# resolution, error locations).
# =============================================================================

import pytest

from hack_sdk.assembler.instructions import AddressInstruction, ComputeInstruction
from hack_sdk.assembler.parser import (
    first_pass,
    match_label,
    parse_instruction,
    second_pass,
)
from hack_sdk.assembler.source import (
    SourceLine,
    clean_line,
    number_lines,
    read_source,
    read_source_file,
)
from hack_sdk.assembler.symbols import SymbolTable
from hack_sdk.errors import (
    AddressRangeError,
    AssemblySyntaxError,
    InvalidMnemonicError,
)


def lines(*texts):
    """Number plain strings as consecutive source lines."""
    return number_lines(texts)


# =============================================================================
# Source Reader
# =============================================================================

class TestSourceReader:
    """Test line cleaning and numbering."""

    def test_drops_blank_and_comment_lines(self):
        source = "// header\n\n   @2\n\t// indented comment\nD=A\n"
        result = read_source(source)
        assert result == [SourceLine(3, "@2"), SourceLine(5, "D=A")]

    def test_trims_whitespace(self):
        assert read_source("   M=D   \r\n") == [SourceLine(1, "M=D")]

    def test_end_of_line_comment(self):
        assert clean_line("D=M   // load") == "D=M"
        assert clean_line("@i// no space") == "@i"

    def test_inner_whitespace_kept(self):
        assert clean_line("  D = A  ") == "D = A"

    def test_empty_source(self):
        assert read_source("") == []

    def test_only_newline_ends_a_line(self):
        """Form feeds and Unicode separators do not start new lines."""
        source = "// page\x0c\n@1\n// sep\u2028\nD=A\n"
        assert read_source(source) == [SourceLine(2, "@1"), SourceLine(4, "D=A")]

    def test_read_source_file(self, tmp_path):
        path = tmp_path / "Prog.asm"
        path.write_text("// header\n\n@7\r\nD=A // load\n")
        assert read_source_file(path) == [SourceLine(3, "@7"), SourceLine(4, "D=A")]

    def test_number_lines_passes_source_lines_through(self):
        existing = SourceLine(42, "@1")
        assert number_lines([existing, "D=A"]) == [existing, SourceLine(2, "D=A")]


# =============================================================================
# Pass 1 - Labels
# =============================================================================

class TestFirstPass:
    """Test label scanning."""

    def test_label_only_program(self):
        table = SymbolTable()
        result = first_pass(lines("(LOOP)", "@LOOP", "0;JMP"), table)
        assert [line.text for line in result] == ["@LOOP", "0;JMP"]
        assert table.get("LOOP") == 0

    def test_label_address_counts_instructions_only(self):
        """Consecutive labels all bind to the next instruction."""
        table = SymbolTable()
        first_pass(lines("@1", "(A1)", "(A2)", "(A3)", "D=A", "(END)", "@END", "0;JMP"), table)
        assert table.get("A1") == 1
        assert table.get("A2") == 1
        assert table.get("A3") == 1
        assert table.get("END") == 2

    def test_label_at_end(self):
        table = SymbolTable()
        result = first_pass(lines("@0", "D=M", "(END)"), table)
        assert len(result) == 2
        assert table.get("END") == 2

    def test_labels_do_not_allocate_variables(self):
        table = SymbolTable()
        first_pass(lines("(X)", "@Y", "(Z)", "D=A"), table)
        assert table.next_variable_address == 16
        assert "Y" not in table

    def test_keeps_line_numbers(self):
        source = [SourceLine(3, "(L)"), SourceLine(4, "@L"), SourceLine(9, "0;JMP")]
        result = first_pass(source, SymbolTable())
        assert [line.number for line in result] == [4, 9]

    @pytest.mark.parametrize("text,name", [
        ("(LOOP)", "LOOP"),
        ("(Main.main$ret.1)", "Main.main$ret.1"),
        ("(a b)", "a b"),
    ])
    def test_match_label(self, text, name):
        assert match_label(text) == name

    @pytest.mark.parametrize("text", ["()", "(A)B", "(A))", "LOOP", "(LOOP", "@LOOP"])
    def test_not_a_label(self, text):
        assert match_label(text) is None


# =============================================================================
# Pass 2 - Classification
# =============================================================================

class TestSecondPass:
    """Test instruction classification and resolution."""

    def test_classification(self):
        result = second_pass(lines("@5", "D=A", "@x", "0;JMP"), SymbolTable())
        assert [type(inst) for inst in result] == [
            AddressInstruction, ComputeInstruction, AddressInstruction, ComputeInstruction,
        ]

    def test_label_wins_over_variable(self):
        """A label declared later in the source is still a label in pass 2."""
        table = SymbolTable()
        source = lines("@END", "0;JMP", "(END)", "@END", "0;JMP")
        commands = first_pass(source, table)
        result = second_pass(commands, table)
        assert result[0].encode() == 2
        assert result[2].encode() == 2
        assert table.next_variable_address == 16

    def test_variables_allocated_in_first_use_order(self):
        table = SymbolTable()
        result = second_pass(lines("@b", "@a", "@b", "@c"), table)
        assert [inst.encode() for inst in result] == [16, 17, 16, 18]

    def test_source_attached(self):
        result = second_pass([SourceLine(12, "M=D")], SymbolTable())
        assert result[0].source == SourceLine(12, "M=D")

    def test_address_operand_keeps_everything_after_at(self):
        """Operand is the rest of the line, including odd characters."""
        table = SymbolTable()
        inst = parse_instruction(SourceLine(1, "@foo=bar"), table)
        assert inst.symbol == "foo=bar"


class TestSecondPassErrors:
    """Test fatal parse errors and their locations."""

    def test_unknown_computation(self):
        with pytest.raises(AssemblySyntaxError):
            second_pass(lines("X=Y"), SymbolTable())

    def test_error_reports_line_number(self):
        source = [SourceLine(1, "@1"), SourceLine(7, "D=D+B")]
        with pytest.raises(InvalidMnemonicError) as exc_info:
            second_pass(source, SymbolTable(), filename="Prog.asm")
        error = exc_info.value
        assert error.location.filename == "Prog.asm"
        assert error.location.line == 7
        assert error.location.column == 3
        assert "Prog.asm:7:3: error: unrecognized computation 'D+B'" in str(error)
        assert "D=D+B" in str(error)

    def test_jump_column(self):
        with pytest.raises(InvalidMnemonicError) as exc_info:
            parse_instruction(SourceLine(2, "D;JXX"), SymbolTable())
        assert exc_info.value.location.column == 3

    def test_destination_column(self):
        with pytest.raises(InvalidMnemonicError) as exc_info:
            parse_instruction(SourceLine(2, "Q=1"), SymbolTable())
        assert exc_info.value.field == "destination"
        assert exc_info.value.location.column == 1

    @pytest.mark.parametrize("text", [
        "D = A",
        "=D",
        "D;",
        "A=B=C",
        "D;JMP;JMP",
        "(LOOP",
        "DM=M+1;jmp",
    ])
    def test_malformed_lines(self, text):
        with pytest.raises(AssemblySyntaxError):
            parse_instruction(SourceLine(1, text), SymbolTable())

    def test_missing_address_operand(self):
        with pytest.raises(AssemblySyntaxError, match="missing address operand"):
            parse_instruction(SourceLine(4, "@"), SymbolTable())

    def test_address_out_of_range_located(self):
        with pytest.raises(AddressRangeError) as exc_info:
            parse_instruction(SourceLine(9, "@40000"), SymbolTable(), filename="Big.asm")
        assert exc_info.value.location.line == 9
        assert str(exc_info.value).startswith("Big.asm:9:2: error: address 40000 is out of range")

    def test_address_out_of_range_allowed_when_not_strict(self):
        inst = parse_instruction(SourceLine(1, "@32768"), SymbolTable(), strict_address_range=False)
        assert inst.encode() == 0

    def test_failure_stops_before_later_lines(self):
        """Variables after the bad line are never allocated."""
        table = SymbolTable()
        with pytest.raises(AssemblySyntaxError):
            second_pass(lines("@a", "D=Q", "@b"), table)
        assert "a" in table
        assert "b" not in table
