import pytest

from minishell.tokens import Token, TokenType, classify, count_words, split_line, tokenize


def test_split_simple_pipeline():
    assert split_line("ls -l | wc") == ["ls", "-l", "|", "wc"]


def test_split_operators_without_spaces():
    assert split_line("cat<in>>out") == ["cat", "<", "in", ">>", "out"]


def test_split_keeps_quoted_text_together():
    assert split_line('echo "a b" c') == ["echo", '"a b"', "c"]


def test_split_quote_glued_to_word():
    assert split_line('a"b c"d') == ['a"b c"d']


def test_split_unclosed_quote_runs_to_end():
    assert split_line('echo "abc') == ["echo", '"abc']


def test_split_heredoc_operator():
    assert split_line("<<EOF") == ["<<", "EOF"]


def test_split_trims_whitespace():
    assert split_line("  ls  ") == ["ls"]
    assert split_line("a\tb") == ["a", "b"]


def test_split_empty_line():
    assert split_line("") == []
    assert count_words("   ") == 0


def test_split_double_pipe_is_limited_by_word_count():
    assert split_line("a||b") == ["a", "|", "|"]


@pytest.mark.parametrize(
    "line",
    [
        "ls -l | wc",
        "cat<in>>out",
        'echo "a b" c',
        "echo 'x y' > file",
        "  grep  foo  ",
        "<<EOF cat | sort -r",
    ],
)
def test_count_matches_split_length(line):
    assert count_words(line) == len(split_line(line))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("|", TokenType.PIPE),
        ("<<", TokenType.HEREDOC),
        ("<", TokenType.REDIRECT_IN),
        (">", TokenType.APPEND),
        (">>", TokenType.REDIRECT_OUT),
        ("ls", TokenType.WORD),
        ("", TokenType.WORD),
    ],
)
def test_classify(value, expected):
    assert classify(value) is expected


def test_tokenize_types_and_values():
    tokens = tokenize("echo hi > f | wc")
    assert tokens == [
        Token("echo", TokenType.WORD),
        Token("hi", TokenType.WORD),
        Token(">", TokenType.APPEND),
        Token("f", TokenType.WORD),
        Token("|", TokenType.PIPE),
        Token("wc", TokenType.WORD),
    ]


def test_tokenize_redirection_flag():
    tokens = tokenize("cat < in << end")
    assert [t.is_redirection for t in tokens] == [False, True, False, True, False]