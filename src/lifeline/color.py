# SPDX-License-Identifier: MIT

STATUS_COLORS = {
    "completed": "green",
    "taken": "green",
    "missed": "red",
    "upcoming": "yellow",
    "returned": "cyan",
}

TYPE_COLORS = {
    "medication": "blue",
    "appointment": "purple",
    "lab": "cyan",
    "generic": "white",
}

HEADER_COLOR = "dark_orange"
SUB_HEADER_COLOR = "sandy_brown"
TODAY_COLOR = "bold plum1"


def status_markup(status: str) -> str:
    color = STATUS_COLORS.get(status, "white")
    return f"[{color}]{status}[/{color}]"


def type_markup(entry_type: str) -> str:
    color = TYPE_COLORS.get(entry_type, "white")
    return f"[{color}]{entry_type}[/{color}]"
