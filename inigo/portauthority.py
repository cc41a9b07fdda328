"""Sequential allocation of TCP ports for test processes."""

MAX_PORT = 65535


class PortAllocator:
    """Hands out consecutive ports from a fixed, inclusive range.

    Nothing checks whether a port is already in use; give concurrent
    allocators ranges that do not overlap.
    """

    def __init__(self, starting_port, ending_port):
        if ending_port > MAX_PORT:
            raise ValueError(
                "Invalid port range requested. Ports can only be numbers between 0-65535"
            )
        self._next_port = starting_port
        self._ending_port = ending_port

    def claim_ports(self, num_ports):
        """Claim ``num_ports`` consecutive ports and return the first one.

        Raises RuntimeError when the range holds too few ports; in that
        case nothing is claimed.
        """
        if num_ports < 1:
            raise ValueError("at least one port must be claimed")
        port = self._next_port
        if port + num_ports - 1 > self._ending_port:
            raise RuntimeError("insufficient ports available")
        self._next_port = port + num_ports
        return port

    def __repr__(self):
        return f"PortAllocator(next={self._next_port}, end={self._ending_port})"