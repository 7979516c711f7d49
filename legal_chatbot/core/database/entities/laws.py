"""
Law document entity.

Maps the ``laws`` table holding Vietnamese legal documents, either crawled
into the Supabase project or ingested through the upload endpoint.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Column, DateTime, Integer, Text
from sqlmodel import Field

from ..base import Base, utc_now


class Law(Base, table=True):
    """A legal document (văn bản pháp luật).

    Table: laws
    """

    __tablename__ = "laws"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
    )
    # Crawler/upload identifier, stored in the "_id" column
    external_id: Optional[str] = Field(default=None, sa_column=Column("_id", Text, nullable=True))

    title: Optional[str] = Field(default=None, sa_type=Text, description="Document title")
    so_hieu: Optional[str] = Field(default=None, index=True, description="Official document number")
    loai_van_ban: Optional[str] = Field(default=None, description="Document type (Luật, Nghị định, ...)")
    noi_ban_hanh: Optional[str] = Field(default=None, description="Issuing body")
    ngay_ban_hanh: Optional[str] = Field(default=None, description="Issue date (ISO)")
    ngay_cong_bao: Optional[str] = Field(default=None, description="Official gazette date (ISO)")
    ngay_hieu_luc: Optional[str] = Field(default=None, description="Effective date (ISO)")
    nguoi_ky: Optional[str] = Field(default=None, description="Signer")
    so_cong_bao: Optional[str] = Field(default=None, description="Official gazette number")
    tinh_trang: Optional[str] = Field(default=None, description="Validity status")

    noi_dung: Optional[str] = Field(default=None, sa_type=Text, description="Full document text")
    noi_dung_html: Optional[str] = Field(default=None, sa_type=Text)
    thuoc_tinh_html: Optional[str] = Field(default=None, sa_type=Text)
    tom_tat: Optional[str] = Field(default=None, sa_type=Text, description="Short summary")
    tom_tat_html: Optional[str] = Field(default=None, sa_type=Text)
    danh_sach_bang: Optional[str] = Field(default=None, sa_type=Text)
    van_ban_duoc_dan: Optional[str] = Field(default=None, sa_type=Text, description="Referenced documents")

    category: Optional[str] = Field(default=None)
    article_reference: Optional[str] = Field(default=None, description="Article/clause reference")
    link: Optional[str] = Field(default=None, sa_type=Text, description="Direct link to the document")
    source: Optional[str] = Field(default=None, sa_type=Text, description="Source URL")

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Law(id={self.id}, so_hieu={self.so_hieu}, title={self.title!r})"
