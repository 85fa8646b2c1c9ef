from nouframe.greeting import say_hi


def test_say_hi_prints_greeting(capsys):
    say_hi()
    assert capsys.readouterr().out == "Hello cruel world!\n"