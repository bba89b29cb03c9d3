from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ONES = [
    "Zero", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight",
    "Nine", "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
    "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy",
    "Eighty", "Ninety",
]

# Indian grouping, largest first
GROUPS = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
    (100, "Hundred"),
]


def number_to_words(num):
    """Spell a non-negative integer, e.g. 123456 -> One Lakh Twenty ..."""
    if num < 20:
        return ONES[num]
    if num < 100:
        tens, unit = divmod(num, 10)
        return TENS[tens] + (" " + ONES[unit] if unit else "")
    for size, name in GROUPS:
        if num >= size:
            head, rest = divmod(num, size)
            # head may itself exceed 99 for crores; recursion handles it
            words = number_to_words(head) + " " + name
            if rest:
                words += " " + number_to_words(rest)
            return words
    raise AssertionError("unreachable")


def to_words(amount):
    """
    Legal-invoice rendering of a rupee amount.

    The amount is rounded to whole paise first. Paise are spelled out
    only when present:

        to_words(1234)      -> "Rupees One Thousand Two Hundred Thirty Four only"
        to_words(10.5)      -> "Rupees Ten and Fifty Paise only"
        to_words(0)         -> "Rupees Zero only"
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"Not a number: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Amount must be finite: {amount!r}")
    if value < 0:
        raise ValueError(f"Amount cannot be negative: {amount!r}")

    # Enough digits for every paise of the amount, however large
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits),
                       value.adjusted()) + 4
        paise_total = int(
            (value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    rupees, paise = divmod(paise_total, 100)

    text = "Rupees " + number_to_words(rupees)
    if paise:
        text += " and " + number_to_words(paise) + " Paise"
    return text + " only"
