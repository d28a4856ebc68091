# /app/db/base_class.py

# The declarative Base every ORM model in the application inherits from.
# Tables are named after the class with a trailing "s" unless a model
# overrides `__tablename__` itself.

from sqlalchemy.orm import declarative_base, declared_attr


class CustomBase:
    @declared_attr
    def __tablename__(cls) -> str:
        return f"{cls.__name__.lower()}s"


Base = declarative_base(cls=CustomBase)
