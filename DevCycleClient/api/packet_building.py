from typing import Any, Dict, List

from DevCycleClient.api.models import Event, PlatformData, User


def build_user_packet(user: User, platform_data: PlatformData) -> Dict[str, Any]:
    return user.populated(platform_data)


def build_track_packet(
    user: User,
    events: List[Event],
    platform_data: PlatformData,
) -> Dict[str, Any]:
    return {
        "user": build_user_packet(user, platform_data),
        "events": [event.to_dict() for event in events],
    }
