from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class MatchRow(Base):
    __tablename__ = "matches"
    # AUTOINCREMENT so ids are never handed out twice, even after a clear
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)  # epoch ms
    winner: Mapped[str] = mapped_column(String(4), nullable=False)  # "P1" | "P2" | "Draw"
    moves_count: Mapped[int] = mapped_column(Integer, nullable=False)
    board_json: Mapped[str] = mapped_column(Text, nullable=False)
