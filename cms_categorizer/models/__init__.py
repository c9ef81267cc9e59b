"""Data records exchanged with the CMS."""

from .content import CategoryDescriptor, CategoryId, ContentId, ContentItem

__all__ = [
    'CategoryDescriptor',
    'CategoryId',
    'ContentId',
    'ContentItem',
]
