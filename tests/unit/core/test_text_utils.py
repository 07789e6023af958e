import pytest
from app.core.utils.text_utils import strip_text


@pytest.mark.parametrize(
    "test, expected",
    [
        (" Summer Picnic ", "Summer Picnic"),
        ("", None),
        ("   ", None),
        ("\t \n", None),
        (None, None),
        ("  with_table  ", "with_table"),
        (" test ", "test"),
        (5, 5),
    ]
)
def test_text_utils(test, expected):
    assert strip_text(test) == expected
