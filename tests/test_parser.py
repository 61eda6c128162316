import pytest

from vendsim.exceptions import ScriptParseError
from vendsim.script.parser import parse_script, tokenize


def test_parses_every_command():
    commands = parse_script("""
        construct(10, 1, 3; 5)
        configure("a", "b", "c", "d", "e"; 1, 2, 3, 4, 5)
        load(0, 0, 0; 1, 1, 1, 1, 1)
        insert(10) press(0)
        extract() unload()
        CHECK_DELIVERY(0)
        CHECK_DELIVERY(0, "Coke")
        CHECK_TEARDOWN(1; 100)
        CHECK_TEARDOWN(0; 0; "Coke", "Water")
    """)
    assert [c.name for c in commands] == [
        "construct", "configure", "load", "insert", "press", "extract", "unload",
        "CHECK_DELIVERY", "CHECK_DELIVERY", "CHECK_TEARDOWN", "CHECK_TEARDOWN",
    ]
    assert commands[0].args == ((10, 1, 3), (5,))
    assert commands[1].args[0] == ("a", "b", "c", "d", "e")
    assert commands[5].args == ()
    assert commands[8].args == ((0, "Coke"),)
    assert commands[10].args == ((0,), (0,), ("Coke", "Water"))


def test_tracks_line_numbers_and_skips_comments():
    commands = parse_script('construct(1; 1) // build it\n\n  configure("" ; 1)')
    assert [(c.name, c.line) for c in commands] == [("construct", 1), ("configure", 3)]
    assert commands[1].args == (("",), (1,))


def test_string_escapes():
    commands = parse_script(r'configure("say \"hi\"\\\n"; 1)')
    assert commands[0].args[0] == ('say "hi"\\\n',)


def test_negative_integers_reach_the_engine():
    commands = parse_script("load(-1; -1) insert(-5)")
    assert commands[0].args == ((-1,), (-1,))
    assert commands[1].args == ((-5,),)


def test_command_renders_back_to_script_text():
    command = parse_script('configure("Coke", "Wa\\"ter"; 250, 150)')[0]
    assert str(command) == 'configure("Coke", "Wa\\"ter"; 250, 150)'


@pytest.mark.parametrize("script", [
    "construct()",
    "construct(1 2 3; 4)",
    "construct(1, 2, 3; 4",
    "construct(1; 2, 3)",
    "construct(0; )",
    "configure()",
    "configure(a)",
    'configure(""; "1")',
    "load(0)",
    "insert()",
    "press()",
    "unload(1)",
    "CHECK_DELIVERY()",
    'CHECK_DELIVERY("Coke")',
    "CHECK_TEARDOWN(1)",
    "CHECK_TEARDOWN(1; 2; 3)",
    "insert(01)",
    "dance(1)",
    'configure("open; 1)',
    'configure("\\q"; 1)',
])
def test_rejects_malformed_scripts(script):
    with pytest.raises(ScriptParseError):
        parse_script(script)


def test_error_reports_position():
    with pytest.raises(ScriptParseError) as exc_info:
        parse_script("construct(1; 1)\n  press(#)")
    assert exc_info.value.line == 2
    assert exc_info.value.column == 9


def test_tokenize_ignores_whitespace():
    kinds = [t.kind for t in tokenize(' insert ( 5 )\t')]
    assert kinds == ["name", "punct", "int", "punct"]
