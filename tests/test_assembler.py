# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the complete Hack assembler, from source text to
# .hack output.
#
# Test coverage includes:
#   - Complete program assembly
#   - Labels, variables and predefined symbols together
#   - Error reporting and the no-partial-output guarantee
#   - Listing and symbol files
# =============================================================================

import pytest

from hack_sdk.assembler import Assembler, assemble, assemble_file, format_word
from hack_sdk.config import AssemblerConfig
from hack_sdk.errors import AddressRangeError, AssemblerError, AssemblySyntaxError


ADD_ASM = """\
// Computes R0 = 2 + 3  (R0 refers to RAM[0])

@2
D=A
@3
D=D+A
@0
M=D
"""

ADD_HACK = [
    "0000000000000010",
    "1110110000010000",
    "0000000000000011",
    "1110000010010000",
    "0000000000000000",
    "1110001100001000",
]

MAX_ASM = """\
// Computes R2 = max(R0, R1)

   @R0
   D=M              // D = first number
   @R1
   D=D-M            // D = first number - second number
   @OUTPUT_FIRST
   D;JGT            // if D>0 (first is greater) goto output_first
   @R1
   D=M              // D = second number
   @OUTPUT_D
   0;JMP            // goto output_d
(OUTPUT_FIRST)
   @R0
   D=M              // D = first number
(OUTPUT_D)
   @R2
   M=D              // M[2] = D (greatest number)
(INFINITE_LOOP)
   @INFINITE_LOOP
   0;JMP            // infinite loop
"""

MAX_HACK = [
    "0000000000000000",
    "1111110000010000",
    "0000000000000001",
    "1111010011010000",
    "0000000000001010",
    "1110001100000001",
    "0000000000000001",
    "1111110000010000",
    "0000000000001100",
    "1110101010000111",
    "0000000000000000",
    "1111110000010000",
    "0000000000000010",
    "1110001100001000",
    "0000000000001110",
    "1110101010000111",
]

SUM_ASM = """\
// Adds 1+...+100 into sum
    @i
    M=1     // i=1
    @sum
    M=0     // sum=0
(LOOP)
    @i
    D=M
    @100
    D=D-A
    @END
    D;JGT   // if (i-100)>0 goto END
    @i
    D=M
    @sum
    M=D+M   // sum += i
    @i
    M=M+1   // i++
    @LOOP
    0;JMP
(END)
    @END
    0;JMP
"""


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline from source to words."""

    def test_add_program(self):
        asm = Assembler()
        words = asm.assemble_string(ADD_ASM)
        assert [format_word(w) for w in words] == ADD_HACK

    def test_add_program_from_clean_lines(self):
        asm = Assembler()
        words = asm.assemble_lines(["@2", "D=A", "@3", "D=D+A", "@0", "M=D"])
        assert [format_word(w) for w in words] == ADD_HACK

    def test_max_program(self):
        words = assemble(MAX_ASM)
        assert [format_word(w) for w in words] == MAX_HACK

    def test_loop_label(self):
        asm = Assembler()
        words = asm.assemble_lines(["(LOOP)", "@LOOP", "0;JMP"])
        assert [format_word(w) for w in words] == ["0000000000000000", "1110101010000111"]
        assert asm.get_symbols()["LOOP"] == 0

    def test_repeated_variable(self):
        """Two references to an unseen name share one variable slot."""
        asm = Assembler()
        words = asm.assemble_lines(["@foo", "@foo"])
        assert words == [16, 16]
        assert asm.get_symbol_table().next_variable_address == 17

    def test_sum_program_symbols(self):
        asm = Assembler()
        asm.assemble_string(SUM_ASM)
        symbols = asm.get_symbols()
        assert symbols["i"] == 16
        assert symbols["sum"] == 17
        assert symbols["LOOP"] == 4
        assert symbols["END"] == 18
        assert len(asm.get_words()) == 20

    def test_output_text(self):
        asm = Assembler()
        asm.assemble_string(ADD_ASM)
        assert asm.get_output() == "\n".join(ADD_HACK) + "\n"

    def test_empty_source(self):
        asm = Assembler()
        assert asm.assemble_string("// nothing here\n\n") == []
        assert asm.get_output() == ""

    def test_assembler_is_reusable(self):
        """Each run starts from a fresh symbol table."""
        asm = Assembler()
        asm.assemble_lines(["@first"])
        words = asm.assemble_lines(["@second"])
        assert words == [16]
        assert "first" not in asm.get_symbols()

    def test_custom_variable_base(self):
        asm = Assembler(config=AssemblerConfig(variable_base=100))
        assert asm.assemble_lines(["@x", "@y"]) == [100, 101]

    def test_label_shadowing_register(self):
        """A label named like a predefined symbol replaces it.

        Documents inherited behaviour: the later @R1 no longer means
        RAM[1]. Whether this should be an error is an open question.
        """
        asm = Assembler()
        words = asm.assemble_lines(["@R1", "D=M", "(R1)", "@R1", "0;JMP"])
        assert words[0] == 2
        assert words[2] == 2

    def test_duplicate_label_last_wins(self):
        asm = Assembler()
        words = asm.assemble_lines(["(L)", "@L", "(L)", "@L"])
        assert words == [1, 1]


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrorHandling:
    """Test fatal errors and the no-partial-output guarantee."""

    def test_malformed_line_aborts(self):
        asm = Assembler()
        with pytest.raises(AssemblySyntaxError):
            asm.assemble_lines(["X=Y"])
        assert asm.get_words() == []
        assert asm.get_output() == ""

    def test_error_after_valid_lines_leaves_no_output(self):
        asm = Assembler()
        with pytest.raises(AssemblerError):
            asm.assemble_lines(["@1", "D=A", "D=D+Q", "M=D"])
        assert asm.get_words() == []
        assert asm.get_instructions() == []
        assert asm.get_symbols() == {}

    def test_failed_run_clears_previous_result(self):
        asm = Assembler()
        asm.assemble_string(ADD_ASM)
        with pytest.raises(AssemblerError):
            asm.assemble_string("@1\nbogus\n")
        assert asm.get_output() == ""

    def test_error_line_number_in_original_source(self):
        """Line numbers count blank and comment lines."""
        source = "// comment\n\n@1\n(L)\nD=B\n"
        with pytest.raises(AssemblySyntaxError) as exc_info:
            Assembler().assemble_string(source, "Bad.asm")
        assert exc_info.value.location.line == 5
        assert str(exc_info.value).startswith("Bad.asm:5:3:")

    def test_out_of_range_literal(self):
        with pytest.raises(AddressRangeError):
            assemble("@32768")

    def test_out_of_range_literal_not_strict(self):
        asm = Assembler(config=AssemblerConfig(strict_address_range=False))
        assert asm.assemble_lines(["@32768"]) == [0]

    def test_variable_allocation_overflow(self):
        asm = Assembler(config=AssemblerConfig(variable_base=32767))
        with pytest.raises(AddressRangeError) as exc_info:
            asm.assemble_string("@a\nD=A\n@b\n", "Vars.asm")
        assert str(exc_info.value).startswith("Vars.asm:3:2:")
        assert asm.get_words() == []

    def test_variable_base_from_env_out_of_range(self, monkeypatch):
        monkeypatch.setenv("HACK_VARIABLE_BASE", "40000")
        asm = Assembler(config=AssemblerConfig.from_env())
        assert asm.assemble_lines(["@x"]) == [16]


# =============================================================================
# File I/O Tests
# =============================================================================

class TestFileIO:
    """Test reading sources and writing outputs."""

    def test_assemble_from_file(self, tmp_path):
        source = tmp_path / "Add.asm"
        source.write_text(ADD_ASM)
        words = assemble_file(source)
        assert [format_word(w) for w in words] == ADD_HACK

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Assembler().assemble_file(tmp_path / "missing.asm")

    def test_error_names_file(self, tmp_path):
        source = tmp_path / "Bad.asm"
        source.write_text("@1\nD=Z\n")
        with pytest.raises(AssemblerError) as exc_info:
            Assembler().assemble_file(source)
        assert exc_info.value.location.filename == str(source)

    def test_file_line_numbers(self, tmp_path):
        """Line numbers count newlines only, as an editor shows them."""
        source = tmp_path / "Paged.asm"
        source.write_text("// page one\x0c\n@1\r\nD=Q\n")
        with pytest.raises(AssemblerError) as exc_info:
            Assembler().assemble_file(source)
        assert exc_info.value.location.line == 3

    def test_file_not_utf8(self, tmp_path):
        source = tmp_path / "Latin1.asm"
        source.write_bytes(b"\xff\xfe@1\n")
        with pytest.raises(UnicodeDecodeError):
            Assembler().assemble_file(source)

    def test_write_hack(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(ADD_ASM)
        out = tmp_path / "Add.hack"
        asm.write_hack(out)
        assert out.read_text().splitlines() == ADD_HACK

    def test_write_symbols(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(SUM_ASM)
        out = tmp_path / "Sum.sym"
        asm.write_symbols(out)
        lines = out.read_text().splitlines()
        assert lines[0] == "# Symbol table"
        assert "i 16 variable" in lines
        assert "LOOP 4 label" in lines
        assert not any(line.startswith("SP ") for line in lines)

    def test_listing(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(SUM_ASM)
        listing = asm.get_listing()
        assert "Hack Assembler Listing" in listing
        assert "    0  0000000000010000     2  @i" in listing
        assert "LOOP" in listing

        out = tmp_path / "Sum.lst"
        asm.write_listing(out)
        assert out.read_text() == listing
