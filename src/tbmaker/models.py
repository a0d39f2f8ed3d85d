"""Canonical Pydantic models shared across all tbmaker modules.

The models fall into two groups:

**Codebase models** -- produced by the class-definition loader and bound
into templates by the renderer:
    :class:`Option`, :class:`Command`, :class:`Member`, :class:`Facet`,
    :class:`Structure`, :class:`Group` and the root aggregate
    :class:`CodeBase`.

**Generator records** -- produced while discovering and reading
templates:
    :class:`Against`, :class:`Generator`, :class:`TemplateMetadata`,
    :class:`GenerationReport`.

The codebase owns its commands and structures; facets belong to their
structure and groups are a derived view, so there are no reference
cycles between models.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# --- Commands ---


class Option(BaseModel):
    """A single command-line option of a :class:`Command`.

    ``enums`` lists the enumerated values the option accepts. When
    non-empty, the command's ``validate.go`` must reference the domain
    string ``[a|b|c]`` built from them.
    """

    name: str
    type: str = "string"
    description: str = ""
    enums: list[str] = Field(default_factory=list)


class Command(BaseModel):
    """A routed command, identified by its lowercase ``route`` slug."""

    route: str
    group: str = ""
    description: str = ""
    options: list[Option] = Field(default_factory=list)

    @property
    def readme_name(self) -> str:
        """File name of the command's documentation page."""
        return f"{self.route}.md"


# --- Structures ---


class Member(BaseModel):
    """A field of a :class:`Structure`.

    Members render in :attr:`sort_name` order: the explicit ``sort`` rank
    first, then the lower-cased name.
    """

    name: str
    type: str = "string"
    description: str = ""
    sort: int = 0

    @property
    def sort_name(self) -> str:
        return f"{self.sort:04d}-{self.name.lower()}"


class Facet(BaseModel):
    """A named view of a :class:`Structure`, rendered in its own binding."""

    name: str
    attributes: list[str] = Field(default_factory=list)

    @property
    def folder(self) -> str:
        """Path segment that replaces ``-facet-`` in a destination path.

        A facet literally named ``index`` maps to ``indexdata``.
        """
        name = self.name.lower()
        return "indexdata" if name == "index" else name


class Structure(BaseModel):
    """A data type, identified by its proper-cased ``name``.

    ``class`` is a Python keyword, so the lowercase class tag is stored as
    ``class_name`` and read from ``class`` in definition files.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    class_name: str = Field(default="", alias="class")
    route: str = ""
    group: str = ""
    description: str = ""
    disabled: bool = False
    members: list[Member] = Field(default_factory=list)
    facets: list[Facet] = Field(default_factory=list)

    @property
    def route_tag(self) -> str:
        """The route used in destination paths, defaulting to the class tag."""
        return self.route or self.class_name.lower()

    def sort_members(self) -> None:
        """Order :attr:`members` by :attr:`Member.sort_name`, in place."""
        self.members.sort(key=lambda m: m.sort_name)


class Group(BaseModel):
    """A documentation group, derived from the structures that name it."""

    group_name: str
    structures: list[Structure] = Field(default_factory=list)


class CodeBase(BaseModel):
    """Root aggregate: every command and structure, in model order."""

    commands: list[Command] = Field(default_factory=list)
    structures: list[Structure] = Field(default_factory=list)

    def group_list(self) -> list[Group]:
        """Return one :class:`Group` per distinct non-empty structure group.

        Groups appear in the order their first structure appears.
        """
        groups: dict[str, Group] = {}
        for structure in self.structures:
            if not structure.group:
                continue
            if structure.group not in groups:
                groups[structure.group] = Group(group_name=structure.group)
            groups[structure.group].structures.append(structure)
        return list(groups.values())


# --- Generator records ---


class Against(str, enum.Enum):
    """Template categories, named after the folders under ``generators/``."""

    CODEBASE = "codebase"
    GROUPS = "groups"
    ROUTES = "routes"
    TYPES = "types"


class Generator(BaseModel):
    """One category folder and its templates.

    ``templates`` holds paths relative to the category folder, sorted
    lexicographically. ``against`` stays a plain string so that an
    unrecognised folder reaches the dispatcher and fails there.
    """

    against: str
    templates: list[str] = Field(default_factory=list)


class TemplateMetadata(BaseModel):
    """The leading ``/* ... */`` block of a template. Only ``output`` is required."""

    output: str
    scope: str = ""


class GenerationReport(BaseModel):
    """Counts collected over one generation pass."""

    written: int = 0
    unchanged: int = 0
    skipped: int = 0
    outputs: list[str] = Field(default_factory=list)

    def record(self, destination: str, changed: bool) -> None:
        self.outputs.append(destination)
        if changed:
            self.written += 1
        else:
            self.unchanged += 1

    def summary(self) -> str:
        return f"{self.written} written, {self.unchanged} unchanged, {self.skipped} skipped"
