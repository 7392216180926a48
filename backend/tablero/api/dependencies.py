"""Route Dependencies — per-request services built on the process-wide store.

Design Decisions:
    - Services are cheap wrappers around the store, so each request builds
      its own; tests swap the store via app.dependency_overrides[get_store]
"""

from fastapi import Depends

from tablero.config import get_settings
from tablero.core.repository_protocols import EntityStore
from tablero.infrastructure.store_provider import get_store
from tablero.services.board_repository import BoardRepository
from tablero.services.card_repository import CardRepository
from tablero.services.csv_transceiver import CsvTransceiver
from tablero.services.ordering_engine import OrderingEngine


def get_board_repository(store: EntityStore = Depends(get_store)) -> BoardRepository:
    return BoardRepository(store, OrderingEngine(store))


def get_card_repository(store: EntityStore = Depends(get_store)) -> CardRepository:
    engine = OrderingEngine(store)
    return CardRepository(store, BoardRepository(store, engine), engine)


def get_csv_transceiver(
    boards: BoardRepository = Depends(get_board_repository),
    cards: CardRepository = Depends(get_card_repository),
) -> CsvTransceiver:
    settings = get_settings()
    return CsvTransceiver(
        boards, cards,
        template_title=settings.csv_template_title,
        template_content=settings.csv_template_content,
    )
