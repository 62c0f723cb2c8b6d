"""Initialize database (create tables). Run: python backend/init_db.py"""
from waqf.database import engine, Base
from waqf import models, project_models, campaign_models, product_models, content_models  # noqa: F401
from waqf import donation_models, order_models, user_models  # noqa: F401


def init():
    Base.metadata.create_all(bind=engine)


if __name__ == '__main__':
    print('Initializing DB...')
    init()
    print('DB initialized.')
