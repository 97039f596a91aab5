from __future__ import annotations

import pytest

from prompt_planner.api import call_api, get_api_function, get_api_functions, register_api
from prompt_planner.api.registry import REGISTRY


def test_relative_date_schema_has_enum_and_required_fields():
    tool = get_api_function("get_relative_date").as_tool()
    assert tool["type"] == "function"
    parameters = tool["function"]["parameters"]
    assert parameters["required"] == ["base_date", "offset", "unit"]
    assert parameters["properties"]["unit"]["enum"] == ["days", "weeks", "months"]
    assert parameters["properties"]["offset"]["type"] == "integer"
    assert "negative" in parameters["properties"]["offset"]["description"]


def test_optional_parameters_are_not_required():
    schema = get_api_function("get_next_weekday").parameter_schema
    assert "include_today" not in schema["required"]
    assert schema["properties"]["include_today"]["type"] == "boolean"


def test_category_filter():
    assert len(get_api_functions("dates")) == 6
    assert get_api_functions("nope") == []


def test_unknown_function_raises_key_error():
    with pytest.raises(KeyError):
        get_api_function("does_not_exist")


def test_register_and_call():
    @register_api("echo_for_test", description="Echo", category="test", parameters={"text": "Text to echo."})
    def echo(text: str, times: int = 1) -> str:
        return text * times

    try:
        assert call_api("echo_for_test", text="ab", times=2) == "abab"
        with pytest.raises(TypeError):
            call_api("echo_for_test", wrong="x")
        with pytest.raises(ValueError):
            register_api("echo_for_test", description="again", category="test")(echo)
    finally:
        REGISTRY.pop("echo_for_test", None)
