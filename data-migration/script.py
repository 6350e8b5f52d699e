"""
This script imports normalized transaction tables (CSV exports collected
over time) into the finance tracker database for one existing user.

Every row goes through the same validation as the API
(app.services.transactions.create_transaction), so ownership, category kind
and transfer rules hold for imported data too.

Expected columns (case-insensitive):
- date          YYYY-MM-DD or ISO datetime
- amount        whole minor units, thousand separators allowed ("500.000")
- type          income | expense | transfer
- wallet        source wallet name (created as "cash" if missing)
- category      required for income/expense (created if missing)
- to_wallet     destination wallet name, transfers only
- description   optional

Usage (from the project root):
    python data-migration/script.py <username> [folder]

The project root is put on sys.path below, because running a file puts only
its own folder there and the "data-migration" folder name cannot be
imported as a package with `python -m`.
"""


from __future__ import annotations

import logging
import sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import load_settings  # noqa: E402
from db import create_db_engine, create_session_factory, init_db  # noqa: E402
from logger import setup_logging  # noqa: E402
from models import Category, User, Wallet  # noqa: E402
from app.errors import FinanceError, ValidationError  # noqa: E402
from app.services import categories as category_service  # noqa: E402
from app.services import wallets as wallet_service  # noqa: E402
from app.services.import_helpers import parse_minor_units  # noqa: E402
from app.services.transactions import TransactionInput, create_transaction  # noqa: E402

logger = logging.getLogger("app.data_migration")

NORMALIZED_DIR = Path("data-migration/normalized")
REQUIRED_COLUMNS = {"date", "amount", "type", "wallet"}


def _none_if_nan(x):
    if pd.isna(x):
        return None
    s = str(x).strip()
    return None if s == "" or s.lower() == "nan" else s


def _wallet_id(session, user_id: int, name: str, cache: dict) -> int:
    if name not in cache:
        wallet = (
            session.query(Wallet)
            .filter(Wallet.user_id == user_id, Wallet.name == name)
            .first()
        )
        if wallet is None:
            cache[name] = wallet_service.create_wallet(session, user_id, name=name).id
        else:
            cache[name] = wallet.id
    return cache[name]


def _category_id(session, user_id: int, name: str, kind: str, cache: dict) -> int:
    key = (name, kind)
    if key not in cache:
        category = (
            session.query(Category)
            .filter(Category.user_id == user_id, Category.name == name, Category.kind == kind)
            .first()
        )
        if category is None:
            category = category_service.create_category(session, user_id, name, kind)
        cache[key] = category.id
    return cache[key]


def import_rows(session, user_id: int, df: pd.DataFrame) -> tuple[int, int]:
    """
    Import one normalized DataFrame. Returns (inserted, skipped).

    Rows that fail validation are logged and skipped.
    """
    wallets: dict = {}
    categories: dict = {}
    inserted = skipped = 0

    for line_no, row in enumerate(df.to_dict("records"), start=2):
        try:
            tx_type = (_none_if_nan(row.get("type")) or "").lower()
            wallet_name = _none_if_nan(row.get("wallet"))
            if wallet_name is None:
                raise ValidationError("wallet is empty")

            category_name = _none_if_nan(row.get("category"))
            to_wallet_name = _none_if_nan(row.get("to_wallet"))

            data = TransactionInput(
                amount=parse_minor_units(_none_if_nan(row.get("amount"))),
                type=tx_type,
                wallet_id=_wallet_id(session, user_id, wallet_name, wallets),
                to_wallet_id=(
                    _wallet_id(session, user_id, to_wallet_name, wallets)
                    if tx_type == "transfer" and to_wallet_name
                    else None
                ),
                category_id=(
                    _category_id(session, user_id, category_name, tx_type, categories)
                    if tx_type in ("income", "expense") and category_name
                    else None
                ),
                description=_none_if_nan(row.get("description")),
                date=_none_if_nan(row.get("date")),
            )
            create_transaction(session, user_id, data)
            inserted += 1
        except FinanceError as exc:
            session.rollback()
            skipped += 1
            logger.warning("line %s skipped: %s", line_no, exc.message)

    return inserted, skipped


def import_normalized_csvs_to_db(username: str, folder: Path = NORMALIZED_DIR) -> int:
    folder = Path(folder)
    csv_files = sorted(folder.glob("*.csv"))
    if not csv_files:
        raise FileNotFoundError(f"No CSV files found in: {folder.resolve()}")

    settings = load_settings()
    setup_logging(settings)

    engine = create_db_engine(settings.database_url)
    init_db(engine)
    session = create_session_factory(engine)()

    total_inserted = 0

    try:
        user = session.query(User).filter(User.username == username).first()
        if user is None:
            raise ValueError(f"Unknown user: {username!r}")
        user_id = user.id
        session.rollback()

        for f in csv_files:
            df = pd.read_csv(f, dtype=str)

            # normalize headers
            df.columns = df.columns.str.strip().str.lower()

            missing = REQUIRED_COLUMNS - set(df.columns)
            if missing:
                raise ValueError(f"{f.name}: missing required columns: {sorted(missing)}")

            # drop fully empty rows
            df = df.dropna(how="all").copy()

            inserted, skipped = import_rows(session, user_id, df)
            total_inserted += inserted
            logger.info("Imported %s rows from %s (%s skipped)", inserted, f.name, skipped)

        logger.info("DONE. Total inserted: %s", total_inserted)
        return total_inserted

    finally:
        session.close()
        engine.dispose()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    import_normalized_csvs_to_db(
        sys.argv[1],
        Path(sys.argv[2]) if len(sys.argv) > 2 else NORMALIZED_DIR,
    )
