"""
Tag sets for AWS resources.

Every resource carries DEFAULT_TAGS plus its Environment and Name, so costs
can be split per stack and resources found by name in the console.
"""

from collections.abc import Mapping
from typing import Optional

from infra.configs.constants import DEFAULT_TAGS


def merge_tags(*tag_sets: Mapping[str, Optional[str]]) -> dict[str, str]:
    """
    Merge tag mappings left to right; later keys win.

    Keys whose value is None are dropped, so optional tags can be passed
    straight through.
    """
    merged: dict[str, str] = {}
    for tags in tag_sets:
        for key, value in tags.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
    return merged


def create_tags(
    environment: str,
    resource_name: str,
    **extra_tags: Optional[str],
) -> dict[str, str]:
    """
    Tags for one resource of the stack.

    Args:
        environment: Deployment environment
        resource_name: Value of the Name tag
        **extra_tags: Tags added on top of (or overriding) the defaults

    Returns:
        Tag dictionary
    """
    return merge_tags(
        DEFAULT_TAGS,
        {"Environment": environment, "Name": resource_name},
        extra_tags,
    )
