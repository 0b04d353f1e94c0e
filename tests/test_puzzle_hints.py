import json

from huntclient.schemas.hunt import Progress, Question
from huntclient.services.puzzle_hints import HintTimer, PuzzleHint, format_clock, load_puzzle_hints, question_key


def test_load_hints(tmp_path):
    path = tmp_path / "hints.json"
    path.write_text(json.dumps({"7": {"question": "Six times seven", "hint": "Multiply"}, "8": {"hint": "Look up"}}))
    hints = load_puzzle_hints(path)
    assert hints["7"] == PuzzleHint(question="Six times seven", hint="Multiply")
    assert hints["8"].question is None
    assert load_puzzle_hints(tmp_path / "missing.json") == {}
    assert load_puzzle_hints(None) == {}


def test_question_key():
    assert question_key(Question(image="images/07.png"), None) == "7"
    assert question_key(Question(id=12, text="riddle"), None) == "12"
    assert question_key(Question(text="riddle"), Progress(completed=4, total=16)) == "5"
    assert question_key(None, None) is None


def test_timer_reveals_after_threshold():
    now = [0.0]
    timer = HintTimer({"3": PuzzleHint(hint="Behind the door")}, reveal_after=420, clock=lambda: now[0])
    timer.start("3")
    now[0] = 300
    assert timer.time_until_hint == 120
    assert format_clock(timer.time_until_hint) == "2:00"
    assert timer.current_hint() is None
    now[0] = 420
    assert timer.current_hint().hint == "Behind the door"

    # same question again keeps the running clock
    timer.start("3")
    assert timer.elapsed == 420
    timer.hide()
    assert timer.current_hint() is None

    timer.start("4")
    assert timer.elapsed == 0
    timer.stop()
    assert timer.current_hint() is None


def test_no_hint_for_unknown_question():
    now = [0.0]
    timer = HintTimer({}, reveal_after=1, clock=lambda: now[0])
    timer.start("9")
    now[0] = 10
    assert timer.current_hint() is None
