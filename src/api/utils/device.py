import re

from fastapi import Request

from src.app.repositories.session_repository import DeviceInfo
from src.domain.entities import DeviceType

_MOBILE = re.compile(r"Mobile|Android|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini", re.I)
_TABLET = re.compile(r"iPad|Tablet", re.I)
_DESKTOP = re.compile(r"Windows|Macintosh|Linux|X11", re.I)

# First match wins
_BROWSERS = (
    ("Edge", re.compile(r"Edge|Edg/", re.I)),
    ("Opera", re.compile(r"Opera|OPR/", re.I)),
    ("Chrome", re.compile(r"Chrome", re.I)),
    ("Firefox", re.compile(r"Firefox", re.I)),
    ("Safari", re.compile(r"Safari", re.I)),
)

_OPERATING_SYSTEMS = (
    ("Windows 10", re.compile(r"Windows NT 10", re.I)),
    ("Windows 7", re.compile(r"Windows NT 6\.1", re.I)),
    ("Windows Vista", re.compile(r"Windows NT 6\.0", re.I)),
    ("Windows", re.compile(r"Windows", re.I)),
    ("iOS", re.compile(r"iPhone|iPad|iPod", re.I)),
    ("macOS", re.compile(r"Mac OS X", re.I)),
    ("Android", re.compile(r"Android", re.I)),
    ("Linux", re.compile(r"Linux", re.I)),
)


def classify_device(user_agent: str) -> DeviceType:
    if _MOBILE.search(user_agent):
        return DeviceType.tablet if _TABLET.search(user_agent) else DeviceType.mobile
    if _DESKTOP.search(user_agent):
        return DeviceType.desktop
    return DeviceType.unknown


def _first_match(user_agent: str, patterns) -> str:
    for label, pattern in patterns:
        if pattern.search(user_agent):
            return label
    return "Unknown"


def parse_user_agent(user_agent: str, ip_address: str = None) -> DeviceInfo:
    user_agent = user_agent or "Unknown"
    return DeviceInfo(
        user_agent=user_agent,
        device_type=classify_device(user_agent),
        browser=_first_match(user_agent, _BROWSERS),
        os=_first_match(user_agent, _OPERATING_SYSTEMS),
        ip_address=ip_address,
    )


def parse_device_info(request: Request) -> DeviceInfo:
    """Device metadata from the User-Agent header and the peer address"""
    ip_address = request.client.host if request.client else None
    return parse_user_agent(request.headers.get("user-agent", ""), ip_address)
