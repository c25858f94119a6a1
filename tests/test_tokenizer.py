from bf_runner import Op, tokenize, debug_tokens


def test_every_symbol_maps_to_its_op():
    assert tokenize("><+-.,[]") == (
        Op.RIGHT,
        Op.LEFT,
        Op.INC,
        Op.DEC,
        Op.PRINT,
        Op.READ,
        Op.LOOP_OPEN,
        Op.LOOP_CLOSE,
    )


def test_other_characters_are_comments():
    ops = tokenize("ab 9\n\t#")
    assert ops == (Op.COMMENT,) * 7


def test_length_is_preserved():
    for src in ["", "+", "hello [+] world\n", "++>--<..,,[[]]" * 10, "ünïcödé+"]:
        assert len(tokenize(src)) == len(src)


def test_positions_line_up_with_source():
    src = "a+b[c]"
    ops = tokenize(src)
    assert ops[1] == Op.INC
    assert ops[3] == Op.LOOP_OPEN
    assert ops[5] == Op.LOOP_CLOSE


def test_comment_is_zero_and_has_no_symbol():
    assert Op.COMMENT == 0
    assert Op.COMMENT.symbol == ''
    assert Op.LOOP_OPEN.symbol == '['
    assert Op.READ.symbol == ','


def test_debug_tokens_skips_comments():
    assert debug_tokens(tokenize("+ a [-]\n.")) == ["INC", "LOOP_OPEN", "DEC", "LOOP_CLOSE", "PRINT"]
    assert debug_tokens(tokenize("no code here")) == []
