"""Menu builder.

Turns an option list plus optional sentinel entries into rows of buttons.
Sentinels always come first, in the order given, followed by the catalog items
in source order. Nothing is truncated.

Every button carries a SelectionToken naming the step that rendered it, so the
engine routes a click back by comparing (step_index, field) instead of parsing
string prefixes.
"""

from collections.abc import Sequence

from jobsearch_bot.wizard.state import (
    Menu,
    MenuButton,
    OptionItem,
    SelectionToken,
    Sentinel,
)

# Telegram rejects callback_data longer than 64 bytes
MAX_CALLBACK_DATA_BYTES = 64

_TOKEN_SEPARATOR = ":"


def build_menu(
    items: Sequence[OptionItem],
    step_index: int,
    field: str,
    columns: int = 2,
    sentinels: Sequence[Sentinel] = (),
) -> Menu:
    """Build a grid of selection buttons.

    Args:
        items: Catalog options in display order.
        step_index: Index of the step rendering the menu.
        field: Session field the step owns.
        columns: Maximum buttons per row (>= 1).
        sentinels: Reserved entries placed before the items.

    Returns:
        Menu with ceil((len(items) + len(sentinels)) / columns) rows.

    Raises:
        ValueError: If columns < 1 or two entries share an id.
    """
    if columns < 1:
        raise ValueError(f"columns must be >= 1, got {columns}")

    entries = [(s.label, s.id) for s in sentinels]
    entries.extend((item.label, item.id) for item in items)

    seen: set[str] = set()
    buttons: list[MenuButton] = []
    for label, value in entries:
        if value in seen:
            raise ValueError(f"Duplicate menu id '{value}' for step {step_index}")
        seen.add(value)
        buttons.append(
            MenuButton(
                label=label,
                token=SelectionToken(step_index=step_index, field=field, value=value),
            )
        )

    rows = [buttons[i : i + columns] for i in range(0, len(buttons), columns)]
    return Menu(rows=rows)


def encode_token(token: SelectionToken) -> str:
    """Serialize a token into Telegram callback_data.

    Format: "<step_index>:<field>:<value>". The value may itself contain the
    separator; decoding splits at most twice.

    Raises:
        ValueError: If the encoded form exceeds Telegram's 64-byte limit.
    """
    data = _TOKEN_SEPARATOR.join((str(token.step_index), token.field, token.value))
    if len(data.encode("utf-8")) > MAX_CALLBACK_DATA_BYTES:
        raise ValueError(f"callback_data too long: {data!r}")
    return data


def decode_token(data: str) -> SelectionToken | None:
    """Parse callback_data back into a token.

    Returns:
        The token, or None when the data is not a wizard token (other buttons,
        e.g. "start_search", or garbage).
    """
    parts = data.split(_TOKEN_SEPARATOR, 2)
    if len(parts) != 3:
        return None
    raw_index, field, value = parts
    if not (raw_index.isascii() and raw_index.isdigit()) or not field or not value:
        return None
    return SelectionToken(step_index=int(raw_index), field=field, value=value)
