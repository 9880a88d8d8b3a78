"""
Создание и сброс схемы БД по моделям приложения.

    academic-provision setup        создать таблицы и индексы
    academic-provision reset        удалить все таблицы
    academic-provision reset-setup  удалить и создать заново
"""
import logging
import os
import sys

from app.core.logging import setup_logging
from app.db import Base
from app.db.session import build_engine

logger = logging.getLogger(__name__)

REQUIRED_ENV = ("DATABASE_URL", "SECRET_KEY")

USAGE = """Использование: academic-provision <команда>

Команды:
  setup        создать все таблицы и индексы
  reset        удалить все таблицы
  reset-setup  удалить и создать таблицы заново
"""


def missing_env():
    return [name for name in REQUIRED_ENV if not os.environ.get(name)]


def setup(engine):
    for table in Base.metadata.sorted_tables:
        logger.info("Создание таблицы %s", table.name)
    Base.metadata.create_all(bind=engine)
    print(f"Создано таблиц: {len(Base.metadata.sorted_tables)}")


def reset(engine):
    for table in reversed(Base.metadata.sorted_tables):
        logger.info("Удаление таблицы %s", table.name)
    Base.metadata.drop_all(bind=engine)
    print("Все таблицы удалены")


def reset_setup(engine):
    reset(engine)
    setup(engine)


COMMANDS = {
    "setup": setup,
    "reset": reset,
    "reset-setup": reset_setup,
}


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        print(USAGE)
        sys.exit(1)

    missing = missing_env()
    if missing:
        print("Не заданы переменные окружения: " + ", ".join(missing))
        sys.exit(1)

    setup_logging()
    engine = build_engine(os.environ["DATABASE_URL"])
    try:
        COMMANDS[argv[0]](engine)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
