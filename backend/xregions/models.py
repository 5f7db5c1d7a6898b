# backend/xregions/models.py
from sqlalchemy import MetaData, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Naming convention for constraints (required for batch migrations)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=convention)


class XRegionRow(Base):
    """Flags and temporary group of one defined region."""
    __tablename__ = "xregions"

    name: Mapped[str] = mapped_column(String, primary_key=True)

    # Comma-joined flag tokens, e.g. "ForcePvp,Heal"
    actions: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    # Group name; empty string means none
    temp_group: Mapped[str] = mapped_column(Text, nullable=False, server_default="")


class XRegionBanRow(Base):
    """Item and projectile bans of one defined region. A missing row means no bans."""
    __tablename__ = "xregion_bans"

    name: Mapped[str] = mapped_column(String, primary_key=True)

    # Comma-joined integer ids
    item_bans: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    projectile_bans: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
