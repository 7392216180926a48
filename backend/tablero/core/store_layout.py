"""Store Layout — the persisted path scheme, in one place.

    boards/<boardId>
    cards/<boardId>/<columnId>/<cardId>
"""

BOARDS_ROOT = "boards"
CARDS_ROOT = "cards"


def board_path(board_id: str) -> str:
    return f"{BOARDS_ROOT}/{board_id}"


def board_cards_path(board_id: str) -> str:
    return f"{CARDS_ROOT}/{board_id}"


def column_cards_path(board_id: str, column_id: str) -> str:
    return f"{CARDS_ROOT}/{board_id}/{column_id}"


def card_path(board_id: str, column_id: str, card_id: str) -> str:
    return f"{CARDS_ROOT}/{board_id}/{column_id}/{card_id}"
