import pytest
from ModeSitter.text_index import TextIndex


class TestTextIndex:
    @pytest.fixture
    def index(self):
        # "é" is two bytes and "😀" is four bytes in utf-8
        return TextIndex("ab\né😀x\n\nlast")

    def test_lines(self, index):
        assert index.line_count == 4
        assert index.line_text(1) == "é😀x"
        assert index.line_text(2) == ""

    def test_line_start(self, index):
        assert [index.line_start(i) for i in range(4)] == [0, 3, 7, 8]

    # fmt: off
    @pytest.mark.parametrize(
        "char, byte",
        [
            pytest.param(0, 0,  id="start"),
            pytest.param(3, 3,  id="before_multibyte"),
            pytest.param(4, 5,  id="after_two_byte"),
            pytest.param(5, 9,  id="after_four_byte"),
            pytest.param(12, 16, id="end"),
        ],
    )
    # fmt: on
    def test_char_byte_round_trip(self, index, char, byte):
        assert index.char_to_byte(char) == byte
        assert index.byte_to_char(byte) == char

    def test_line_of(self, index):
        assert index.line_of_char(0) == 0
        assert index.line_of_char(2) == 0  # the newline belongs to its line
        assert index.line_of_char(3) == 1
        assert index.line_of_char(7) == 2
        assert index.line_of_byte(index.line_to_byte(3)) == 3

    def test_ascii(self):
        index = TextIndex("abc\ndef")
        assert index.char_to_byte(5) == 5
        assert index.byte_to_char(5) == 5
        assert index.line_to_byte(1) == 4
