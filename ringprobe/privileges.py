"""
Privilege checks for raw ICMP probing.
"""
import os
import platform
import ctypes


def is_admin() -> bool:
    """
    Checks if the process is running with administrator or root privileges.

    Returns:
        bool: True if running with elevated privileges, False otherwise.
    """
    try:
        if platform.system() == "Windows":
            return ctypes.windll.shell32.IsUserAnAdmin() != 0  # type: ignore[attr-defined]
        elif hasattr(os, 'geteuid'):
            return os.geteuid() == 0  # type: ignore[attr-defined]  # pylint: disable=no-member
        return False
    except AttributeError:
        return False


def elevation_hint() -> str:
    """Platform-specific advice shown when ICMP probing lacks privilege."""
    if platform.system() == "Windows":
        return "ICMP ping requires elevated privilege. Run ring from an Administrator prompt."
    return "ICMP ping requires elevated privilege. Run ring with 'sudo' or grant CAP_NET_RAW."
