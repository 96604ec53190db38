from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from activity_tracker.core.logging import configure_logging
from activity_tracker.database.bootstrap import apply_sql_file

logger = logging.getLogger("scripts.seed_db")


def main() -> None:
    load_dotenv(override=False)
    configure_logging(level="INFO", fmt="text")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
    apply_sql_file(db_config, sql_path=seed_path)

    logger.info(
        "seeded demo shift windows -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
