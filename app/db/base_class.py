# /app/db/base_class.py

from sqlalchemy.orm import declarative_base, declared_attr


class _CatalogBase:
    # Tables default to the lowercased class name unless a model overrides it.
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


Base = declarative_base(cls=_CatalogBase)
