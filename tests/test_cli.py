import builtins
import json

import pytest

from stacc.__main__ import format_state, main
from stacc.values import Function


def write(tmp_path, name, source):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_run_file(tmp_path, capsys):
    path = write(tmp_path, 'prog.stacc', 'push 2\npush 3\nprint pop * pop\n')
    main([str(path)])
    assert capsys.readouterr().out == '6\n'


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / 'nope.stacc')])
    assert exc.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_runtime_error_exits_nonzero(tmp_path, capsys):
    path = write(tmp_path, 'bad.stacc', 'print 1\npop\nprint 2\n')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert 'Stack error - Stack is empty' in captured.err


def test_parse_error_reports_position(tmp_path, capsys):
    path = write(tmp_path, 'bad.stacc', 'print 1\nset 5 5\n')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    assert capsys.readouterr().err.strip() == 'Parse error at 2:5 - Expected identifier, got integer literal'


def test_emit_and_run_ast(tmp_path, capsys):
    path = write(tmp_path, 'prog.stacc', 'begin f: a\n    push a * 2.5\nend\npush 2\ncall f\nprint pop\n')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'prog.stacc.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text(encoding='utf-8'))
    assert data[0]['type'] == 'FunctionDef'

    main(['--ast', str(out_path)])
    assert capsys.readouterr().out == '5\n'


def test_repl_keeps_state_across_errors(monkeypatch, capsys):
    lines = iter(['set x 1', '', 'print nope', 'set 1', 'push x + 1'])

    def fake_input(prompt=''):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, 'input', fake_input)
    main([])
    captured = capsys.readouterr()
    assert 'Value error - nope is undefined' in captured.err
    assert 'Parse error at 1:5' in captured.err
    # The final table shows x and the pushed value side by side.
    assert '| x     | 1     |  | 2     |' in captured.out


def test_repl_reports_incomplete_definition(monkeypatch, capsys):
    lines = iter(['   ', 'begin f: a'])

    def fake_input(prompt=''):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, 'input', fake_input)
    main([])
    # The whitespace-only line is skipped silently; the cut-off definition is not.
    assert capsys.readouterr().err.strip() == 'Parse error at 2:1 - Unexpected EOF'


def test_format_state():
    table = format_state({'b': 2.0, 'a': 'hello world'}, [1.0, True, 3.0])
    assert table.split('\n') == [
        '| Ident | Value       |  | Stack |',
        '|-------|-------------|  |-------|',
        '| a     | hello world |  | 1     |',
        '| b     | 2           |  | true  |',
        ' ' * 25 + '| 3     |',
    ]


def test_format_state_more_variables_than_stack():
    table = format_state({'f': Function('f', ('a',), ())}, [])
    assert table.split('\n') == [
        '| Ident | ' + 'Value'.ljust(15) + ' |  | Stack |',
        '|-------|' + '-' * 17 + '|  |-------|',
        '| f     | <function f(a)> |',
    ]
