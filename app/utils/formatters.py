"""
Data formatting utilities for bill presentation
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Union

Number = Union[Decimal, int, float, str]


def _to_whole_units(amount: Number) -> int:
    """Round an amount to whole currency units."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {amount!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Not a finite amount: {amount!r}")
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CurrencyFormatter:
    """Currency formatting utilities"""

    CURRENCY_SYMBOLS = {
        'VND': '₫',
        'USD': '$',
        'EUR': '€',
    }

    # currency -> (thousands separator, decimal separator, decimal places)
    CURRENCY_STYLES = {
        'VND': ('.', ',', 0),
        'USD': (',', '.', 2),
        'EUR': ('.', ',', 2),
    }

    @classmethod
    def format_amount(cls, amount: Number,
                      currency: str = 'VND',
                      include_symbol: bool = True) -> str:
        """Format monetary amount, e.g. 210880 -> '210.880 ₫'"""
        thousands, decimal_sep, places = cls.CURRENCY_STYLES.get(currency, (',', '.', 2))
        quantum = Decimal(1).scaleb(-places)
        value = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)

        sign = '-' if value < 0 else ''
        text = f"{abs(value):,.{places}f}"
        text = text.replace(',', '\x00').replace('.', decimal_sep).replace('\x00', thousands)

        if not include_symbol:
            return f"{sign}{text}"
        symbol = cls.CURRENCY_SYMBOLS.get(currency, currency)
        if currency == 'USD':
            return f"{sign}{symbol}{text}"
        return f"{sign}{text} {symbol}"

    @classmethod
    def parse_amount(cls, amount_str: str, currency: str = 'VND') -> Decimal:
        """Parse formatted amount string to Decimal"""
        thousands, decimal_sep, _ = cls.CURRENCY_STYLES.get(currency, (',', '.', 2))
        cleaned = amount_str
        for symbol in cls.CURRENCY_SYMBOLS.values():
            cleaned = cleaned.replace(symbol, '')
        cleaned = cleaned.strip().replace(thousands, '').replace(decimal_sep, '.')
        try:
            return Decimal(cleaned)
        except InvalidOperation as exc:
            raise ValueError(f"Cannot parse amount: {amount_str!r}") from exc


class AmountInWords:
    """Spell out bill totals in Vietnamese or English."""

    VI_DIGITS = ['không', 'một', 'hai', 'ba', 'bốn', 'năm', 'sáu', 'bảy', 'tám', 'chín']
    VI_SCALES = ['', 'nghìn', 'triệu']

    EN_ONES = [
        'zero', 'one', 'two', 'three', 'four', 'five', 'six', 'seven', 'eight',
        'nine', 'ten', 'eleven', 'twelve', 'thirteen', 'fourteen', 'fifteen',
        'sixteen', 'seventeen', 'eighteen', 'nineteen',
    ]
    EN_TENS = ['', '', 'twenty', 'thirty', 'forty', 'fifty', 'sixty', 'seventy', 'eighty', 'ninety']
    EN_SCALES = ['', 'thousand', 'million', 'billion', 'trillion']

    # ------------------------------------------------------------------ #
    # Vietnamese
    # ------------------------------------------------------------------ #

    @classmethod
    def _vi_below_thousand(cls, n: int) -> str:
        hundred, remainder = divmod(n, 100)
        ten, one = divmod(remainder, 10)
        words: List[str] = []

        if hundred:
            words += [cls.VI_DIGITS[hundred], 'trăm']
            if 0 < remainder < 10:
                words.append('lẻ')

        if ten > 1:
            words += [cls.VI_DIGITS[ten], 'mươi']
            if one == 1:
                words.append('mốt')
            elif one == 5:
                words.append('lăm')
            elif one:
                words.append(cls.VI_DIGITS[one])
        elif ten == 1:
            words.append('mười')
            if one == 5:
                words.append('lăm')
            elif one:
                words.append(cls.VI_DIGITS[one])
        elif one:
            words.append(cls.VI_DIGITS[one])

        return ' '.join(words)

    @classmethod
    def _vi_number(cls, n: int) -> str:
        billions, rest = divmod(n, 1_000_000_000)
        parts: List[str] = []
        if billions:
            parts += [cls._vi_number(billions), 'tỷ']

        groups = []
        while rest:
            rest, group = divmod(rest, 1000)
            groups.append(group)
        for scale in range(len(groups) - 1, -1, -1):
            group = groups[scale]
            if group:
                parts.append(cls._vi_below_thousand(group))
                if cls.VI_SCALES[scale]:
                    parts.append(cls.VI_SCALES[scale])
        return ' '.join(parts)

    @classmethod
    def to_vietnamese(cls, amount: Number, currency_word: str = 'đồng') -> str:
        """
        Vietnamese amount in words.

        Example:
            >>> AmountInWords.to_vietnamese(210880)
            'Hai trăm mười nghìn tám trăm tám mươi đồng'
        """
        value = _to_whole_units(amount)
        if value < 0:
            raise ValueError("Amount in words requires a non-negative amount")
        if value == 0:
            return f"Không {currency_word}"
        text = cls._vi_number(value)
        return f"{text[0].upper()}{text[1:]} {currency_word}"

    # ------------------------------------------------------------------ #
    # English
    # ------------------------------------------------------------------ #

    @classmethod
    def _en_below_thousand(cls, n: int) -> str:
        hundred, remainder = divmod(n, 100)
        words: List[str] = []
        if hundred:
            words += [cls.EN_ONES[hundred], 'hundred']
        if remainder >= 20:
            tens, one = divmod(remainder, 10)
            words.append(cls.EN_TENS[tens] + (f"-{cls.EN_ONES[one]}" if one else ''))
        elif remainder:
            words.append(cls.EN_ONES[remainder])
        return ' '.join(words)

    @classmethod
    def to_english(cls, amount: Number, currency_word: str = 'dong') -> str:
        """English amount in words, e.g. 'Two hundred ten thousand dong'."""
        value = _to_whole_units(amount)
        if value < 0:
            raise ValueError("Amount in words requires a non-negative amount")
        if value == 0:
            return f"Zero {currency_word}"

        parts: List[str] = []
        scale = 0
        while value:
            if scale >= len(cls.EN_SCALES):
                raise ValueError(f"Amount too large to spell out: {amount}")
            value, group = divmod(value, 1000)
            if group:
                chunk = cls._en_below_thousand(group)
                if cls.EN_SCALES[scale]:
                    chunk = f"{chunk} {cls.EN_SCALES[scale]}"
                parts.insert(0, chunk)
            scale += 1
        text = ' '.join(parts)
        return f"{text[0].upper()}{text[1:]} {currency_word}"


def amount_to_words(amount: Number, locale: str = 'vi') -> str:
    """Amount in words for a locale ('vi' or 'en')."""
    if locale == 'vi':
        return AmountInWords.to_vietnamese(amount)
    if locale == 'en':
        return AmountInWords.to_english(amount)
    raise ValueError(f"Unsupported amount text locale: {locale}")
