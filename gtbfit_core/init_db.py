# init_db.py
from sqlalchemy.engine import Engine

from gtbfit_core.db import Base
from gtbfit_core import models  # noqa: F401  registers tables on Base


def init_db(engine: Engine):
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    from gtbfit_core.config import get_settings
    from gtbfit_core.db import make_engine

    init_db(make_engine(get_settings().database_url))
