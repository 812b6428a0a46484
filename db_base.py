from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Metadata holder for every record collection table.

    Kept free of engine/session imports so collection modules can be
    imported without pulling in an async driver.
    """
    pass
