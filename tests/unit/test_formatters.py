from decimal import Decimal

import pytest

from app.utils.formatters import AmountInWords, CurrencyFormatter, amount_to_words


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "Không đồng"),
        (5, "Năm đồng"),
        (15, "Mười lăm đồng"),
        (21, "Hai mươi mốt đồng"),
        (105, "Một trăm lẻ năm đồng"),
        (210880, "Hai trăm mười nghìn tám trăm tám mươi đồng"),
        (1000000, "Một triệu đồng"),
        (2500000, "Hai triệu năm trăm nghìn đồng"),
    ],
)
def test_vietnamese_words(amount, expected) -> None:
    assert AmountInWords.to_vietnamese(amount) == expected


def test_vietnamese_billions() -> None:
    assert AmountInWords.to_vietnamese(3_000_000_000) == "Ba tỷ đồng"


def test_english_words() -> None:
    assert AmountInWords.to_english(0) == "Zero dong"
    assert AmountInWords.to_english(1_000_021) == "One million twenty-one dong"


def test_negative_amount_has_no_words() -> None:
    with pytest.raises(ValueError):
        AmountInWords.to_vietnamese(-1)


def test_unknown_locale() -> None:
    with pytest.raises(ValueError):
        amount_to_words(100, "fr")


def test_fractional_amount_rounds_to_whole_units() -> None:
    assert amount_to_words(Decimal("99.5"), "en") == "One hundred dong"


def test_currency_formatting() -> None:
    assert CurrencyFormatter.format_amount(210880) == "210.880 ₫"
    assert CurrencyFormatter.format_amount(Decimal("1234.5"), currency="USD") == "$1,234.50"
    assert CurrencyFormatter.format_amount(-5000, include_symbol=False) == "-5.000"


def test_parse_formatted_amount() -> None:
    assert CurrencyFormatter.parse_amount("210.880 ₫") == Decimal("210880")
