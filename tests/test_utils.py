import pytest

import utils


@pytest.fixture(autouse=True)
def fresh_prompts():
    utils.reset_prompts()
    yield
    utils.reset_prompts()


def use_answers(tmp_path, lines):
    path = tmp_path / "answers.inp"
    path.write_text("\n".join(lines) + "\n")
    utils.set_input_file(path)


def test_answers_come_from_input_file(tmp_path):
    use_answers(tmp_path, ["# comment", "12", "2.5", "yes", "Binary"])
    assert utils.prompt_int("count?") == 12
    assert utils.prompt_float("value?") == 2.5
    assert utils.prompt_yn("sure?") is True
    assert utils.prompt_choice("format", ["ascii", "binary"]) == "binary"


def test_invalid_answers_are_asked_again(tmp_path):
    use_answers(tmp_path, ["abc", "0", "7", "3 1", "1 2"])
    assert utils.prompt_int("count?", minval=1) == 7
    assert utils.prompt_range("range?") == (1.0, 2.0)


def test_axis_pair(tmp_path):
    use_answers(tmp_path, ["0 0", "0 5", "2, 1"])
    assert utils.prompt_axis_pair("axes?", 3) == (2, 1)


def test_terminal_default(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _: "")
    assert utils.prompt_int("count?", 4) == 4


def test_terminal_eof_exits(monkeypatch):
    def eof(_):
        raise EOFError
    monkeypatch.setattr("builtins.input", eof)
    with pytest.raises(SystemExit):
        utils.prompt("anything?")


def test_answers_are_logged(tmp_path):
    use_answers(tmp_path, ["3"])
    utils.set_log_file(tmp_path / "run.log")
    utils.prompt_int("count?", 1)
    utils.close_log_file()
    assert (tmp_path / "run.log").read_text() == "# count? [1]\n3\n"
