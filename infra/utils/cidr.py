"""
Subnet CIDR allocation.

Carves the VPC block into equally sized subnets, tier by tier and AZ by AZ:
with three AZs and /24 subnets the public tier gets 10.0.0-2, private 10.0.3-5
and isolated 10.0.6-8.
"""

import ipaddress
from collections.abc import Sequence


def allocate_subnet_cidrs(
    vpc_cidr: str,
    tiers: Sequence[str],
    az_count: int,
    new_prefix: int = 24,
) -> dict[str, list[str]]:
    """
    Allocate one CIDR block per (tier, AZ) pair.

    Args:
        vpc_cidr: VPC CIDR block (e.g. '10.0.0.0/16')
        tiers: Tier names in allocation order
        az_count: Number of availability zones
        new_prefix: Prefix length of each subnet

    Returns:
        Mapping of tier name to its CIDR blocks, one per AZ

    Raises:
        ValueError: If the prefix is not narrower than the VPC or the VPC
            block cannot hold every subnet
    """
    network = ipaddress.ip_network(vpc_cidr)
    if new_prefix <= network.prefixlen:
        raise ValueError(
            f"Subnet prefix /{new_prefix} must be narrower than VPC {vpc_cidr}"
        )

    needed = len(tiers) * az_count
    available = 2 ** (new_prefix - network.prefixlen)
    if needed > available:
        raise ValueError(
            f"VPC {vpc_cidr} holds {available} /{new_prefix} subnets, {needed} required"
        )

    blocks = network.subnets(new_prefix=new_prefix)
    return {
        tier: [str(next(blocks)) for _ in range(az_count)]
        for tier in tiers
    }
