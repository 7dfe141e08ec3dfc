import math

import pandas as pd

from census_scatter.tooltips import format_value, tooltip_text, tooltip_texts

ALABAMA = {"state": "Alabama", "abbr": "AL", "poverty": 18.2, "age": 38.6,
           "income": 42830.0, "healthcare": 13.9, "obesity": 32.4}


def test_poverty_tooltip_carries_percent_units():
    assert tooltip_text(ALABAMA, "poverty", "obesity") == (
        "Alabama\nPoverty: 18.2%\nObesity: 32.4%"
    )


def test_income_tooltip_has_no_unit_and_no_trailing_zero():
    assert tooltip_text(ALABAMA, "income", "obesity") == (
        "Alabama\nHousehold Income: 42830\nObesity: 32.4%"
    )


def test_age_tooltip():
    assert tooltip_text(ALABAMA, "age", "obesity").splitlines()[1] == "Age: 38.6"


def test_format_value():
    assert format_value(15.0) == "15"
    assert format_value(0.1) == "0.1"
    assert format_value(math.nan) == "NaN"
    assert format_value(None) == "NaN"


def test_texts_follow_dataset_order():
    df = pd.DataFrame([ALABAMA, dict(ALABAMA, state="Alaska", abbr="AK", poverty=10.1)])
    texts = tooltip_texts(df, "poverty", "obesity")
    assert [t.splitlines()[0] for t in texts] == ["Alabama", "Alaska"]
    assert texts[1].splitlines()[1] == "Poverty: 10.1%"
