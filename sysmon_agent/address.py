import ipaddress
import socket

import psutil
import structlog

logger = structlog.get_logger(__name__)


PREFERRED_PREFIX = "192.168.1."
FALLBACK_ADDRESS = "127.0.0.1"


def _is_usable_interface(stats) -> bool:
    if stats is None or not stats.isup:
        return False
    flags = getattr(stats, "flags", "") or ""
    return "loopback" not in flags.split(",")


def candidate_addresses():
    """Yield (interface, address) for every up, non-loopback interface's
    routable IPv4 addresses, in enumeration order."""
    addrs = psutil.net_if_addrs()
    stats = psutil.net_if_stats()

    for name, snics in addrs.items():
        if not _is_usable_interface(stats.get(name)):
            continue

        for snic in snics:
            if snic.family != socket.AF_INET:
                continue
            try:
                ip = ipaddress.IPv4Address(snic.address)
            except ValueError as e:
                logger.warning("Skipping unparsable address", interface=name, error=str(e))
                continue
            if ip.is_loopback or ip.is_link_local:
                continue

            logger.info("Found valid IP", address=str(ip), interface=name)
            yield name, str(ip)


def resolve_local_address(preferred_prefix: str = PREFERRED_PREFIX) -> str:
    """Best-guess LAN address: first match on ``preferred_prefix``, else the
    first candidate, else FALLBACK_ADDRESS. Never raises."""
    try:
        candidates = [address for _, address in candidate_addresses()]
    except (OSError, psutil.Error) as e:
        logger.warning(
            "Could not enumerate network interfaces, using fallback",
            address=FALLBACK_ADDRESS,
            error=str(e),
        )
        return FALLBACK_ADDRESS

    if not candidates:
        logger.info("No valid IP found, using fallback", address=FALLBACK_ADDRESS)
        return FALLBACK_ADDRESS

    for address in candidates:
        if address.startswith(preferred_prefix):
            logger.info("Selected IP on preferred prefix", address=address, prefix=preferred_prefix)
            return address

    logger.info("Selected first valid IP", address=candidates[0])
    return candidates[0]
