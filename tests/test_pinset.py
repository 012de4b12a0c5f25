import pytest

from hypibole.pinset import MAX_PIN_INDEX, PinListError, PinSet, parse_pin_index, parse_pin_list


def test_parse_pin_list_collects_distinct_indices():
    assert parse_pin_list("1,2,3,4,5,6,7,8,9,10") == frozenset(range(1, 11))


def test_parse_pin_list_is_order_independent():
    assert parse_pin_list("10,3,7") == parse_pin_list("3,7,10")


def test_parse_pin_list_empty_string_is_empty_set():
    assert parse_pin_list("") == frozenset()


def test_parse_pin_list_skips_empty_entries():
    assert parse_pin_list("4,,5,") == frozenset({4, 5})


@pytest.mark.parametrize("text", ["1,two", "-1", "1.5", "1, 2", " 3", "1,,\t", str(MAX_PIN_INDEX + 1)])
def test_parse_pin_list_rejects_bad_entries(text):
    with pytest.raises(PinListError):
        parse_pin_list(text)


def test_parse_pin_index_bounds():
    assert parse_pin_index("0") == 0
    assert parse_pin_index(str(MAX_PIN_INDEX)) == MAX_PIN_INDEX
    for token in ("+3", " 3", "3 "):
        with pytest.raises(ValueError):
            parse_pin_index(token)


def test_pin_set_from_strings_names_failing_list():
    with pytest.raises(PinListError, match="simsets"):
        PinSet.from_strings("1", "2", "", "x")


def test_pin_set_uses_hardware_only_with_both_whitelists():
    assert PinSet.from_strings("1", "2").uses_hardware
    assert not PinSet.from_strings("1", "").uses_hardware
    assert not PinSet.from_strings("", "2").uses_hardware


def test_pin_set_is_immutable():
    pin_set = PinSet.from_strings("1")
    with pytest.raises(AttributeError):
        pin_set.get_whitelist = frozenset({2})
