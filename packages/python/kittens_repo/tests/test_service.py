from kittens_repo import Kitten, greeting, speak


def test_greeting_uses_name():
    assert greeting(Kitten(name="mk3")) == "Meow name is mk3"


def test_greeting_without_name():
    assert greeting(Kitten(name="")) == "I Dont have a name"


def test_speak_returns_greeting():
    assert speak(Kitten(name="nabi")) == "Meow name is nabi"
