# Author      : LoadBalance contributors
# Date        : 2026-10-19
# File Name   : errors.py


class LoadBalanceError(Exception):
    """Base class for every failure raised by the load balancer."""


class ProtocolViolation(LoadBalanceError):
    """
    A message broke the count-header / payload protocol.

    Raised for negative counts, payloads whose length disagrees with the
    header that announced them, messages addressed to a rank outside the
    communicator and runs that lose or invent elements between phases.
    """


class Starvation(LoadBalanceError):
    """A rank waited longer than the configured timeout for a message."""
