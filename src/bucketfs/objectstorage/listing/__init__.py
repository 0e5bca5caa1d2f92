"""Paginated, prefix-delimited object enumeration."""

from .enumerator import DELIMITER, ObjectEnumerator, PageVisitor

__all__ = ["DELIMITER", "ObjectEnumerator", "PageVisitor"]
