"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- Redirect: Maps a short identifier to its target URL plus moderation/audit data
- BlacklistedDomain: Hostnames for which no redirect may be created or resolved
- BlacklistedWord: Substrings that may never appear inside an identifier

Design Decisions:
- Timestamps are integer epoch milliseconds
- id and url are both unique on redirects, so races between concurrent
  submissions surface as integrity errors rather than duplicate rows
- access_count is denormalized on the redirect row and bumped with one UPDATE
"""

import time
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Column, Integer, String, Text
from sqlmodel import Field, SQLModel


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class Redirect(SQLModel, table=True):
    """
    Main table storing short identifier -> URL mappings.

    Fields:
    - id: Five-character base62 identifier (primary key)
    - url: Target URL, unique across all redirects
    - enabled: False once an administrator disables the redirect
    - ip: Address of the client that first submitted the URL
    - creation_timestamp: Epoch ms at creation
    - access_count: Successful resolutions so far (never decreases)
    - last_access_timestamp: Epoch ms of the last successful resolution
    """
    __tablename__ = "redirects"

    id: str = Field(sa_column=Column(String(5), primary_key=True))
    url: str = Field(sa_column=Column(Text, nullable=False, unique=True))
    enabled: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True, index=True)
    )
    ip: str = Field(sa_column=Column(String(255), nullable=False))
    creation_timestamp: int = Field(
        default_factory=now_ms,
        sa_column=Column(BigInteger, nullable=False)
    )
    access_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0")
    )
    last_access_timestamp: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, nullable=True)
    )


class BlacklistedDomain(SQLModel, table=True):
    """Blacklisted hostname (stored without a leading "www.")."""
    __tablename__ = "domains_blacklist"

    domain: str = Field(sa_column=Column(String(253), primary_key=True))
    blacklisted_timestamp: int = Field(
        default_factory=now_ms,
        sa_column=Column(BigInteger, nullable=False)
    )


class BlacklistedWord(SQLModel, table=True):
    """
    Blacklisted word. A candidate identifier is rejected when any stored
    word occurs inside it.
    """
    __tablename__ = "words_blacklist"

    word: str = Field(sa_column=Column(String(255), primary_key=True))
    blacklisted_timestamp: int = Field(
        default_factory=now_ms,
        sa_column=Column(BigInteger, nullable=False)
    )
