"""Card name matching for maindeck lists."""

from typing import Iterable

SPLIT_CARD_SEPARATOR = '//'


def normalize_card_name(name: str) -> str:
    """Lowercase and trim a card name for comparison."""
    return name.strip().lower()


def deck_contains_card(card_list: Iterable[str], query_name: str) -> bool:
    """
    Check whether a deck's card list contains the queried card.

    Matching is exact after trimming and lowercasing. Split and double-faced
    cards ("Fire // Ice") also match on either face name.

    Args:
        card_list: Card names in the deck
        query_name: Card name to look for

    Returns:
        True if the card is in the list
    """
    query = normalize_card_name(query_name)

    for card_name in card_list:
        candidate = normalize_card_name(card_name)
        if candidate == query:
            return True
        if SPLIT_CARD_SEPARATOR in candidate:
            faces = [face.strip() for face in candidate.split(SPLIT_CARD_SEPARATOR)]
            if query in faces:
                return True

    return False
