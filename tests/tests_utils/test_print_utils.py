# Copyright 2024-2025 pynlr authors. All rights reserved.

from pynlr.utils.print_utils import add_str_header, boxify


def test_add_str_header():
    table = "a | b\n--+--\n1 | 2"

    text = add_str_header(title="T", table=table)
    lines = text.split("\n")

    assert lines[0] == "T".center(5)
    assert lines[1:] == table.split("\n")


def test_add_str_header_long_title():
    text = add_str_header(title="A long title", table="x")

    assert text.split("\n")[0] == "A long title"


def test_boxify():
    boxed = boxify("ab\nabcd", padding=2)
    lines = boxed.split("\n")

    assert lines[0] == "╔" + "═" * 8 + "╗"
    assert lines[1] == "║  ab    ║"
    assert lines[2] == "║  abcd  ║"
    assert lines[-1] == "╚" + "═" * 8 + "╝"
    assert len({len(line) for line in lines}) == 1
