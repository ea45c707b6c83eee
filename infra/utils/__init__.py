"""
Utility functions for Pulumi infrastructure.

Provides naming conventions, tag factories, CIDR allocation and output utilities.
"""

from infra.utils.naming import ResourceNamer
from infra.utils.tags import create_tags, merge_tags
from infra.utils.cidr import allocate_subnet_cidrs
from infra.utils.outputs import render_env_file, write_outputs_to_env

__all__ = [
    "ResourceNamer",
    "create_tags",
    "merge_tags",
    "allocate_subnet_cidrs",
    "render_env_file",
    "write_outputs_to_env",
]
