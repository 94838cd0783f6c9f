from minishell.commands import Command, Redirection, RedirType
from minishell.environment import Environment
from minishell.executor import apply_redirection, execute_pipeline


def make_env(**variables):
    return Environment.from_environ(variables)


def test_no_redirection_returns_false(capfd):
    assert apply_redirection(Command(["echo", "hi"]), make_env()) is False
    assert capfd.readouterr().out == ""


def test_output_redirection_truncates(tmp_path, capfd):
    target = tmp_path / "out.txt"
    target.write_text("old content\n")
    command = Command(["echo", "hi"], [Redirection(str(target), RedirType.OUT)])
    assert apply_redirection(command, make_env()) is True
    assert target.read_text() == "hi \n"
    assert capfd.readouterr().out == ""


def test_append_redirection_appends(tmp_path):
    target = tmp_path / "log.txt"
    command = Command(["echo", "hi"], [Redirection(str(target), RedirType.APPEND)])
    env = make_env()
    apply_redirection(command, env)
    apply_redirection(command, env)
    assert target.read_text() == "hi \nhi \n"


def test_output_redirection_of_external(tmp_path):
    target = tmp_path / "ext.txt"
    command = Command(["sh", "-c", "printf abc"], [Redirection(str(target), RedirType.OUT)])
    apply_redirection(command, make_env())
    assert target.read_text() == "abc"


def test_stdout_restored_after_redirection(tmp_path, capfd):
    target = tmp_path / "out.txt"
    apply_redirection(
        Command(["echo", "inside"], [Redirection(str(target), RedirType.OUT)]), make_env()
    )
    print("after")
    assert capfd.readouterr().out == "after\n"
    assert target.read_text() == "inside \n"


def test_only_first_redirection_used(tmp_path):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    command = Command(
        ["echo", "x"],
        [Redirection(str(first), RedirType.OUT), Redirection(str(second), RedirType.OUT)],
    )
    apply_redirection(command, make_env())
    assert first.read_text() == "x \n"
    assert not second.exists()


def test_output_open_failure(tmp_path, capfd):
    target = tmp_path / "missing-dir" / "out.txt"
    command = Command(["echo", "hi"], [Redirection(str(target), RedirType.OUT)])
    assert apply_redirection(command, make_env()) is True
    captured = capfd.readouterr()
    assert captured.err.startswith("fd error")
    assert captured.out == ""


def test_input_redirection(tmp_path, capfd):
    source = tmp_path / "in.txt"
    source.write_text("line one\n")
    command = Command(["cat"], [Redirection(str(source), RedirType.IN)])
    assert apply_redirection(command, make_env()) is True
    assert capfd.readouterr().out == "line one\n"


def test_missing_input_file(tmp_path, capfd):
    command = Command(["cat"], [Redirection(str(tmp_path / "nope"), RedirType.IN)])
    assert apply_redirection(command, make_env()) is True
    assert capfd.readouterr().err.startswith("open REDIRECT_IN")


def test_heredoc_redirection_reads_body(tmp_path, capfd):
    body = tmp_path / "heredoc"
    body.write_text("from heredoc\n")
    command = Command(["cat"], [Redirection("EOF", RedirType.HEREDOC)], heredoc=str(body))
    assert apply_redirection(command, make_env()) is True
    assert capfd.readouterr().out == "from heredoc\n"


def test_single_command_changes_environment():
    env = make_env()
    execute_pipeline([Command(["export", "X=1"])], env)
    assert env.get("X") == "1"


def test_pipeline_stage_does_not_change_environment(capfd):
    env = make_env()
    execute_pipeline([Command(["export", "X=1"]), Command(["echo", "done"])], env)
    assert env.get("X") is None
    assert capfd.readouterr().out == "done \n"


def test_pipeline_feeds_output_forward(capfd):
    execute_pipeline([Command(["echo", "hello"]), Command(["cat"])], make_env())
    assert capfd.readouterr().out == "hello \n"


def test_three_stage_pipeline(capfd):
    commands = [Command(["echo", "a"]), Command(["cat"]), Command(["cat"])]
    execute_pipeline(commands, make_env())
    assert capfd.readouterr().out == "a \n"


def test_pipeline_last_stage_redirected(tmp_path, capfd):
    target = tmp_path / "result.txt"
    commands = [
        Command(["echo", "a", "b"]),
        Command(["cat"], [Redirection(str(target), RedirType.OUT)]),
    ]
    execute_pipeline(commands, make_env())
    assert target.read_text() == "a b \n"
    assert capfd.readouterr().out == ""


def test_empty_pipeline_does_nothing(capfd):
    env = make_env()
    execute_pipeline([], env)
    assert capfd.readouterr().out == ""
    assert env.status == 0