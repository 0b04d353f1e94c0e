from __future__ import annotations
from huntclient.errors import ValidationFailed

def _blank(value: str | None) -> bool:
    return not (value or "").strip()

def require(values: dict[str, str | None], labels: dict[str, str]) -> None:
    errors = {k: f"{labels[k]} is required" for k in labels if _blank(values.get(k))}
    if errors:
        raise ValidationFailed(errors)

def validate_login(team_name: str, password: str) -> None:
    require({"team_name": team_name, "password": password}, {"team_name": "Team name", "password": "Password"})

def validate_signup(team_name: str, password: str, confirm_password: str) -> None:
    errors: dict[str, str] = {}
    if _blank(team_name):
        errors["team_name"] = "Team name is required"
    elif len(team_name) < 3:
        errors["team_name"] = "Team name must be at least 3 characters"
    if _blank(password):
        errors["password"] = "Password is required"
    elif len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"
    if _blank(confirm_password):
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    if errors:
        raise ValidationFailed(errors)

def validate_location_code(code: str) -> None:
    require({"location_code": code}, {"location_code": "Location code"})

def validate_answer(answer: str, field: str = "puzzle_answer", label: str = "Puzzle answer") -> None:
    require({field: answer}, {field: label})

def validate_winner(leader_name: str, team_name: str) -> None:
    require({"leader_name": leader_name, "team_name": team_name}, {"leader_name": "Leader name", "team_name": "Team name"})

def validate_question_form(hint: str, code: str, question: str, answer: str) -> None:
    values = {"hint": hint, "code": code, "question": question, "answer": answer}
    if any(_blank(v) for v in values.values()):
        raise ValidationFailed({"general": "All fields are required"})

def validate_location_form(name: str, code: str) -> None:
    require({"name": name, "code": code}, {"name": "Location name", "code": "Location code"})
