from autoapply.autofill import PROVIDED, UNMATCHED, autofill
from autoapply.defaults import default_config
from autoapply.matcher import CUSTOM, PROFILE, FieldDescriptor


def test_decisions_follow_field_order():
    config = default_config()
    fields = [
        FieldDescriptor("City", "text"),
        FieldDescriptor("Do you need visa sponsorship?", "radio"),
        FieldDescriptor("Favourite colour", "text"),
    ]
    decisions, learned = autofill(fields, config)
    assert [d.source for d in decisions] == [PROFILE, CUSTOM, UNMATCHED]
    assert decisions[2].value is None and not decisions[2].fillable
    assert learned == 0
    assert config.learned_data.patterns == []


def test_provided_answers_are_learned_once():
    config = default_config()
    asked = []

    def provider(field):
        asked.append(field.label_text)
        return "Blue"

    fields = [FieldDescriptor("Favourite colour", "text")]
    decisions, learned = autofill(fields, config, provider)
    assert (decisions[0].value, decisions[0].source, learned) == ("Blue", PROVIDED, 1)

    decisions, learned = autofill(fields, config, provider)
    assert decisions[0].source == "learned-pattern"
    assert learned == 0
    assert asked == ["Favourite colour"]


def test_dedupe_skips_known_question():
    config = default_config()
    config.learned_data.patterns.clear()
    fields = [FieldDescriptor("Shirt size", "text")]
    autofill(fields, config, lambda f: "M")
    config.learned_data.patterns[0].keywords = ["something else"]
    _, learned = autofill(fields, config, lambda f: "L")
    assert learned == 0
    _, learned = autofill(fields, config, lambda f: "L", dedupe=False)
    assert learned == 1


def test_blank_answer_is_not_recorded():
    config = default_config()
    decisions, learned = autofill([FieldDescriptor("Shirt size", "text")], config, lambda f: "")
    assert decisions[0].source == UNMATCHED
    assert learned == 0
