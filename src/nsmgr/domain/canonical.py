"""Core namespaces every wiki has, with their numeric ids and constants.

Custom namespaces use even ids for the subject namespace and ``id + 1``
for its talk namespace. Negative ids are virtual (Special, Media).
"""

from __future__ import annotations

MAIN_NAME = "Main"
TALK_SUFFIX = "_talk"
TALK_CONSTANT_SUFFIX = "_TALK"

CORE_NAMESPACES: dict[int, str] = {
    -2: "Media",
    -1: "Special",
    0: "",
    1: "Talk",
    2: "User",
    3: "User_talk",
    4: "Project",
    5: "Project_talk",
    6: "File",
    7: "File_talk",
    8: "MediaWiki",
    9: "MediaWiki_talk",
    10: "Template",
    11: "Template_talk",
    12: "Help",
    13: "Help_talk",
    14: "Category",
    15: "Category_talk",
}

CORE_CONSTANTS: dict[str, int] = {
    "NS_MEDIA": -2,
    "NS_SPECIAL": -1,
    "NS_MAIN": 0,
    "NS_TALK": 1,
    "NS_USER": 2,
    "NS_USER_TALK": 3,
    "NS_PROJECT": 4,
    "NS_PROJECT_TALK": 5,
    "NS_FILE": 6,
    "NS_FILE_TALK": 7,
    "NS_MEDIAWIKI": 8,
    "NS_MEDIAWIKI_TALK": 9,
    "NS_TEMPLATE": 10,
    "NS_TEMPLATE_TALK": 11,
    "NS_HELP": 12,
    "NS_HELP_TALK": 13,
    "NS_CATEGORY": 14,
    "NS_CATEGORY_TALK": 15,
}


def talk_id(namespace_id: int) -> int:
    """Return the talk namespace id paired with *namespace_id*."""
    return namespace_id + 1


def is_subject(namespace_id: int) -> bool:
    """True for real, non-talk namespaces (even, non-negative ids)."""
    return namespace_id >= 0 and namespace_id % 2 == 0


def display_name(name: str) -> str:
    """The main namespace has an empty name; show it as ``Main``."""
    return name or MAIN_NAME
