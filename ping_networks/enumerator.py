"""
Expansion of network specifications into address lists
"""

import logging
from typing import List, Optional, Tuple

from .models import CIDRSpec, RangeSpec, TraditionalSpec, NetworkSpec
from .subnet import SubnetCalculator

logger = logging.getLogger(__name__)


class HostEnumerator:
    """Turns a parsed specification into the ordered addresses to probe"""

    @staticmethod
    def bounds(spec: NetworkSpec) -> Optional[Tuple[int, int]]:
        """Inclusive integer bounds of the hosts, None when there are none"""
        if isinstance(spec, RangeSpec):
            return (SubnetCalculator.address_to_int(spec.start_address),
                    SubnetCalculator.address_to_int(spec.end_address))

        if isinstance(spec, CIDRSpec):
            address, mask = spec.base_address, spec.subnet_mask
        elif isinstance(spec, TraditionalSpec):
            address, mask = spec.address, spec.subnet_mask
        else:
            raise TypeError(f"Unsupported network specification: {spec!r}")

        usable = SubnetCalculator.usable_range(address, mask)
        if usable is None:
            return None
        return (SubnetCalculator.address_to_int(usable.first),
                SubnetCalculator.address_to_int(usable.last))

    @classmethod
    def count(cls, spec: NetworkSpec) -> int:
        bounds = cls.bounds(spec)
        return 0 if bounds is None else bounds[1] - bounds[0] + 1

    @classmethod
    def expand(cls, spec: NetworkSpec, max_hosts: Optional[int] = None) -> List[str]:
        """
        Expand a specification into ascending addresses

        Args:
            spec: Parsed network specification
            max_hosts: Keep only the first max_hosts addresses (optional)

        Returns:
            List of addresses; empty for /31 and /32 networks
        """
        bounds = cls.bounds(spec)
        if bounds is None:
            logger.info(f"Network {spec} has no usable host addresses")
            return []

        first, last = bounds
        if max_hosts is not None and last - first + 1 > max_hosts:
            logger.warning(f"Network {spec} has {last - first + 1} hosts, "
                           f"limited to the first {max_hosts}")
            last = first + max_hosts - 1

        return [SubnetCalculator.int_to_address(value) for value in range(first, last + 1)]
