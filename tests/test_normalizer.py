import pytest

from meal_analyzer.errors import ResponseParsingFailure
from meal_analyzer.normalizer import DEFAULT_SUGGESTIONS, extract_json, normalize


def test_json_wrapped_in_prose():
    record = normalize('Sure! {"food_items":[{"name":"Rice","calories":200}]}', "lunch")

    assert len(record.food_items) == 1
    item = record.food_items[0]
    assert item.name == "Rice"
    assert item.calories == 200
    assert item.protein == 0
    assert item.carbs == 0
    assert item.fat == 0
    assert item.quantity == "Unknown"
    assert item.confidence == 0.5
    assert record.total_calories == 200
    assert record.health_score == 70
    assert record.ai_confidence == 0.7
    assert record.suggestions == DEFAULT_SUGGESTIONS
    assert record.meal_type == "lunch"
    assert record.auto_detected is True


def test_markdown_fence_and_trailing_text():
    raw = (
        "Here you go:\n```json\n"
        '{"food_items": [{"name": "Egg", "calories": 78, "protein": 6.3}],'
        ' "suggestions": ["Add greens"]}\n```\nHope that helps {:'
    )
    record = normalize(raw, "breakfast")
    assert record.food_items[0].name == "Egg"
    assert record.food_items[0].protein == 6.3
    assert record.suggestions == ("Add greens",)


def test_brace_in_prose_before_json_is_skipped():
    raw = 'Result {see below}: {"food_items": [{"name": "Soup"}], "total_calories": 90}'
    record = normalize(raw, "dinner")
    assert record.food_items[0].name == "Soup"
    assert record.total_calories == 90


def test_bare_json_text():
    assert extract_json('{"a": 1}') == {"a": 1}


@pytest.mark.parametrize(
    "raw",
    [
        "I could not identify any food in this picture.",
        "",
        "   ",
        '{"food_items": [',
        "[1, 2, 3]",
    ],
)
def test_no_json_object_fails(raw):
    with pytest.raises(ResponseParsingFailure) as exc_info:
        normalize(raw, "lunch")
    assert exc_info.value.kind == "malformed-response"


@pytest.mark.parametrize(
    "raw",
    [
        '{"food_items": "rice and beans"}',
        '{"food_items": {"name": "Rice"}}',
        '{"total_calories": 300}',
        '{"food_items": [], "total_calories": 0}',
    ],
)
def test_missing_or_invalid_food_items_fail(raw):
    with pytest.raises(ResponseParsingFailure):
        normalize(raw, "lunch")


def test_parsing_failure_keeps_cause_but_hides_detail():
    with pytest.raises(ResponseParsingFailure) as exc_info:
        normalize("no json here", "lunch")
    assert exc_info.value.__cause__ is not None
    assert exc_info.value.to_dict() == {
        "error": "malformed-response",
        "message": "Failed to parse AI response",
    }


def test_bad_fields_are_defaulted_not_dropped():
    raw = (
        '{"food_items": ['
        '{"name": 42, "calories": "abc", "protein": "12.5", "carbs": null,'
        ' "fat": true, "quantity": 100, "confidence": "high"},'
        '"just a string",'
        '{"name": "  Apple ", "calories": -5, "confidence": 3}'
        "]}"
    )
    record = normalize(raw, "snack")

    assert len(record.food_items) == 3
    first, second, third = record.food_items
    assert first.name == "Unknown Food"
    assert first.calories == 0
    assert first.protein == 12.5
    assert first.carbs == 0
    assert first.fat == 0
    assert first.quantity == "Unknown"
    assert first.confidence == 0.5
    assert second.name == "Unknown Food"
    assert second.confidence == 0.5
    assert third.name == "Apple"
    assert third.calories == 0
    assert third.confidence == 1.0


def test_model_total_overrides_item_sum():
    raw = (
        '{"food_items": [{"name": "A", "calories": 100}, {"name": "B", "calories": 50}],'
        ' "total_calories": 400}'
    )
    assert normalize(raw, "lunch").total_calories == 400


def test_zero_model_total_is_kept():
    raw = '{"food_items": [{"name": "Water", "calories": 5}], "total_calories": 0}'
    assert normalize(raw, "lunch").total_calories == 0


@pytest.mark.parametrize("total", ['"lots"', "null", "[]"])
def test_non_numeric_total_falls_back_to_item_sum(total):
    raw = (
        '{"food_items": [{"name": "A", "calories": 100}, {"name": "B", "calories": 50.5}],'
        ' "total_calories": %s}' % total
    )
    assert normalize(raw, "lunch").total_calories == 150.5


def test_scores_are_clamped_and_suggestions_defaulted():
    raw = (
        '{"food_items": [{"name": "Cake", "calories": 350}],'
        ' "health_score": 140, "ai_confidence": -1, "suggestions": "eat less"}'
    )
    record = normalize(raw, "snack")
    assert record.health_score == 100
    assert record.ai_confidence == 0
    assert record.suggestions == DEFAULT_SUGGESTIONS


def test_meal_type_comes_from_caller():
    raw = '{"food_items": [{"name": "Toast"}], "meal_type": "dinner"}'
    assert normalize(raw, "早餐").meal_type == "早餐"


def test_same_text_gives_identical_records():
    raw = (
        'Analysis: {"food_items": [{"name": "Rice", "calories": 200, "confidence": 0.8}],'
        ' "health_score": 65, "suggestions": ["More vegetables"]}'
    )
    assert normalize(raw, "lunch") == normalize(raw, "lunch")
    assert normalize(raw, "lunch").to_dict() == normalize(raw, "lunch").to_dict()


def test_integer_too_large_for_float_gets_default():
    raw = '{"food_items":[{"name":"Rice","calories":1' + "0" * 400 + ', "protein": 4}]}'
    record = normalize(raw, "lunch")

    (item,) = record.food_items
    assert item.name == "Rice"
    assert item.calories == 0
    assert item.protein == 4
    assert record.total_calories == 0


def test_deeply_nested_reply_is_a_parsing_failure():
    with pytest.raises(ResponseParsingFailure) as exc_info:
        normalize('{"food_items": ' + "[" * 100000, "lunch")
    assert isinstance(exc_info.value.__cause__, RecursionError)
