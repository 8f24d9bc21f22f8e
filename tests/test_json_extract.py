from newsagent.classification import extract_json


def test_extracts_array_wrapped_in_prose_and_fences():
    text = 'Here are the matches:\n```json\n[{"index": 0, "relevance": 0.9}]\n```\nDone.'

    result = extract_json(text, "array")

    assert result.ok
    assert result.value == [{"index": 0, "relevance": 0.9}]


def test_skips_bracket_that_does_not_start_valid_json():
    text = 'Items [see below] follow: [{"index": 1}]'

    result = extract_json(text, "array")

    assert result.ok
    assert result.value == [{"index": 1}]


def test_object_nested_in_prose():
    text = 'Sure! {"summary": "A new release", "keyPoints": ["fast"]} Hope that helps.'

    result = extract_json(text, "object")

    assert result.ok
    assert result.value["summary"] == "A new release"


def test_empty_array_is_success_not_failure():
    result = extract_json("[]", "array")

    assert result.ok
    assert result.value == []


def test_failure_reasons_are_distinct():
    assert extract_json("", "array").error == "empty response"
    assert extract_json(None, "object").error == "empty response"
    assert extract_json("no json here", "array").error == "no JSON array in response"
    assert extract_json('[{"index": 0,', "array").error == "malformed JSON array in response"


def test_array_request_ignores_objects():
    result = extract_json('{"index": 0}', "array")

    assert not result.ok
    assert result.error == "no JSON array in response"
