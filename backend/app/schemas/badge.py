"""
Badge catalog record.
"""

from pydantic import Field

from .common import DomainRecord


class Badge(DomainRecord):
    id: str = Field(min_length=1)
    name: str
    icon: str
    description: str
