from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base shared by the asset, transaction, user and reservation tables.

    Kept free of engine/session imports so the ORM models can be imported
    without opening a database.
    """
    pass
