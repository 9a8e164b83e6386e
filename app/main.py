from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.config.logging import setup_logging
from app.config.settings import Settings, settings
from app.db.init_db import init_db
from app.db.session import create_db_engine, create_session_factory
from app.services.audit import BillHistoryService
from app.services.billing import BillService
from app.services.debt import DebtService


@dataclass
class BillingApp:
    """Wired services sharing one engine and session factory."""

    config: Settings
    engine: Engine
    session_factory: sessionmaker
    bills: BillService
    history: BillHistoryService
    debt: DebtService


def create_app(
    config: Optional[Settings] = None,
    *,
    configure_logging: bool = True,
) -> BillingApp:
    """
    Application factory.

    - Configures logging from Settings.
    - Creates the engine and session factory.
    - Creates missing tables outside production (use migrations there).
    - Wires the bill, history and debt services.
    """
    config = config or settings
    if configure_logging:
        setup_logging(config)

    engine = create_db_engine(config)
    session_factory = create_session_factory(engine)

    if not config.is_production():
        init_db(engine)

    history = BillHistoryService(session_factory, config)
    return BillingApp(
        config=config,
        engine=engine,
        session_factory=session_factory,
        bills=BillService(session_factory, history_service=history, config=config),
        history=history,
        debt=DebtService(session_factory, config),
    )
