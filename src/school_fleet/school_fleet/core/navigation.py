from __future__ import annotations

from dataclasses import dataclass, field

from .enums import Role

_ALL = (Role.ADMIN, Role.DRIVER, Role.PARENT, Role.TEACHER, Role.STUDENT)


@dataclass(frozen=True)
class NavItem:
    endpoint: str
    label: str
    roles: tuple[Role, ...]
    children: tuple["NavItem", ...] = field(default_factory=tuple)


NAV_ITEMS: tuple[NavItem, ...] = (
    NavItem("dashboard", "Dashboard", _ALL),
    NavItem("approvals", "Approvals", (Role.ADMIN,)),
    NavItem("assignments", "Assignments", (Role.ADMIN,)),
    NavItem("drivers", "Drivers", (Role.ADMIN,)),
    NavItem(
        "vehicles",
        "Vehicles",
        (Role.ADMIN,),
        children=(NavItem("add_vehicle", "Add Vehicle", (Role.ADMIN,)),),
    ),
    NavItem("routes", "Routes", (Role.ADMIN,)),
    NavItem("students", "Students", (Role.ADMIN, Role.TEACHER)),
    NavItem("teachers", "Teachers", (Role.ADMIN,)),
    NavItem("maintenance", "Maintenance", (Role.DRIVER,)),
    NavItem("profile", "Profile", (Role.DRIVER, Role.PARENT, Role.STUDENT)),
)


def nav_for(role: Role) -> list[NavItem]:
    """Navigation entries visible to a role, children filtered too."""
    out: list[NavItem] = []
    for item in NAV_ITEMS:
        if role not in item.roles:
            continue
        children = tuple(c for c in item.children if role in c.roles)
        out.append(NavItem(item.endpoint, item.label, item.roles, children))
    return out
