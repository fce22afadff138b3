"""Known target-library catalogs and mapping auto-discovery."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from dscoverage.config.settings import NATIVE_ELEMENT_PATTERN, DsCoverageSettings, MigrationMapping

__all__ = [
    "CatalogEntry",
    "NativeCatalogEntry",
    "TargetCatalog",
    "SHADCN_CATALOG",
    "KNOWN_CATALOGS",
    "find_catalog",
    "discover_tag_names",
    "discover_migration_mappings",
]

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"</?([A-Za-z][A-Za-z0-9]*)(?:[\s/>]|$)")
_IGNORED_TAGS = frozenset({"Fragment", "React", "children"})
_NATIVE_HTML = frozenset({
    "input", "textarea", "select", "button", "form", "label", "a", "div", "span",
    "p", "ul", "ol", "li", "table", "tr", "td", "th", "thead", "tbody",
})


@dataclass(frozen=True)
class CatalogEntry:
    complexity: str
    guidelines: str
    effort: str | None = None


@dataclass(frozen=True)
class NativeCatalogEntry:
    target: str
    target_import_path: str
    complexity: str
    guidelines: str


@dataclass(frozen=True)
class TargetCatalog:
    """Components a target library provides, keyed by PascalCase name."""
    name: str
    match_token: str
    import_prefix: str
    components: Mapping[str, CatalogEntry] = field(default_factory=lambda: MappingProxyType({}))
    native_elements: Mapping[str, NativeCatalogEntry] = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, component_name: str) -> CatalogEntry | None:
        if not component_name:
            return None
        return self.components.get(component_name[0].upper() + component_name[1:])

    def target_import_path(self, component_name: str) -> str:
        return f"{self.import_prefix}{component_name[0].lower()}{component_name[1:]}"


def _shadcn(component: str, steps: str, complexity: str, effort: str) -> CatalogEntry:
    command = f"npx shadcn@latest add {component.lower()}"
    return CatalogEntry(complexity=complexity, guidelines=f"1. Add shadcn {component}: {command}\n{steps}", effort=effort)


SHADCN_CATALOG = TargetCatalog(
    name="shadcn/ui",
    match_token="shadcn",
    import_prefix="@/components/ui/",
    components=MappingProxyType({
        "Alert": _shadcn("Alert", "2. Replace import and usage\n3. Adapt children to AlertTitle + AlertDescription", "simple", "~15min"),
        "Badge": _shadcn("Badge", "2. Replace import\n3. Map variant prop if needed", "simple", "~10min"),
        "Button": _shadcn("Button", "2. Replace import\n3. Map variant/size props", "simple", "~15min"),
        "Card": _shadcn("Card", "2. Replace Card with CardHeader, CardContent, CardFooter structure", "simple", "~20min"),
        "Dialog": _shadcn(
            "Dialog",
            "2. Replace with Dialog, DialogTrigger, DialogContent, DialogHeader\n3. Adapt open/onOpenChange pattern",
            "moderate", "~30min",
        ),
        "Input": _shadcn("Input", "2. Replace native <input> or old component\n3. Preserve className and ref forwarding", "simple", "~10min"),
        "Label": _shadcn("Label", "2. Replace import\n3. Ensure htmlFor links to form control id", "simple", "~10min"),
        "Select": _shadcn(
            "Select",
            "2. Replace with Select, SelectTrigger, SelectContent, SelectItem\n3. Adapt value/onValueChange pattern",
            "moderate", "~30min",
        ),
        "Separator": _shadcn("Separator", "2. Replace <hr> or custom divider", "simple", "~5min"),
        "Tabs": _shadcn("Tabs", "2. Replace with Tabs, TabsList, TabsTrigger, TabsContent", "moderate", "~25min"),
        "Table": _shadcn(
            "Table",
            "2. Replace Table, TableHeader, TableBody, TableRow, TableCell\n3. Use compound components pattern",
            "moderate", "~25min",
        ),
        "Textarea": _shadcn("Textarea", "2. Replace native <textarea> or old component\n3. Preserve className and ref", "simple", "~10min"),
        "Toast": CatalogEntry(
            complexity="moderate",
            guidelines=(
                "1. Add shadcn Sonner: npx shadcn@latest add sonner\n"
                "2. Replace toast calls with toast() from sonner\n3. Add Toaster provider at root"
            ),
            effort="~30min",
        ),
        "Progress": _shadcn("Progress", "2. Replace import\n3. Map value prop (0-100)", "simple", "~10min"),
        "Skeleton": _shadcn("Skeleton", "2. Replace loading placeholders", "simple", "~10min"),
        "Anchor": CatalogEntry(
            complexity="simple",
            guidelines="1. Use a Link or keep the anchor with consistent styling\n2. Or add an anchor component to components/ui",
            effort="~10min",
        ),
    }),
    native_elements=MappingProxyType({
        "input": NativeCatalogEntry(
            "Input", "@/components/ui/input", "simple",
            "1. Add shadcn Input: npx shadcn@latest add input\n2. Replace <input> with <Input>\n"
            "3. Preserve type, placeholder, value, onChange, className",
        ),
        "textarea": NativeCatalogEntry(
            "Textarea", "@/components/ui/textarea", "simple",
            "1. Add shadcn Textarea: npx shadcn@latest add textarea\n2. Replace <textarea> with <Textarea>\n"
            "3. Preserve value, onChange, rows, className",
        ),
        "select": NativeCatalogEntry(
            "Select", "@/components/ui/select", "moderate",
            "1. Add shadcn Select: npx shadcn@latest add select\n"
            "2. Replace <select> with Select, SelectTrigger, SelectContent, SelectItem\n"
            "3. Map options to SelectItem components",
        ),
        "button": NativeCatalogEntry(
            "Button", "@/components/ui/button", "simple",
            "1. Add shadcn Button: npx shadcn@latest add button\n2. Replace <button> with <Button>\n3. Map type and variant",
        ),
    }),
)

KNOWN_CATALOGS: tuple[TargetCatalog, ...] = (SHADCN_CATALOG,)


def find_catalog(target_ds: str, catalogs: tuple[TargetCatalog, ...] = KNOWN_CATALOGS) -> TargetCatalog | None:
    lowered = (target_ds or "").lower()
    for catalog in catalogs:
        if catalog.match_token in lowered:
            return catalog
    return None


def discover_tag_names(content: str) -> set[str]:
    """Names of opening/closing tags in JSX or template text."""
    return {m.group(1) for m in _TAG_RE.finditer(content) if m.group(1) not in _IGNORED_TAGS}


def _source_import_pattern(primary_directory: str) -> str:
    primary = primary_directory.rstrip("/")
    return "components" if primary.split("/")[0] == "components" else primary


def discover_migration_mappings(
    file_contents: dict[Path, str],
    component_names: list[str],
    scan_dir: Path,
    settings: DsCoverageSettings,
    catalogs: tuple[TargetCatalog, ...] = KNOWN_CATALOGS,
) -> list[MigrationMapping]:
    """Seed mappings from the codebase when migration is on but none are configured.

    Best effort: returns an empty list when the target library is unknown or
    nothing in the codebase matches its catalog.
    """
    migration = settings.migration
    if not migration.enabled or migration.mappings:
        return []
    catalog = find_catalog(migration.target_ds, catalogs)
    if catalog is None:
        return []

    import_pattern = _source_import_pattern(settings.component_analysis.primary_directory)
    mappings: list[MigrationMapping] = []
    seen: set[str] = set()

    def add_component(name: str) -> None:
        entry = catalog.lookup(name)
        if entry is None or name in seen:
            return
        seen.add(name)
        mappings.append(MigrationMapping(
            source=name, source_import_pattern=import_pattern, target=name,
            target_import_path=catalog.target_import_path(name),
            complexity=entry.complexity, guidelines=entry.guidelines, effort=entry.effort,
        ))

    for name in component_names:
        add_component(name)

    tags_by_file = {path: discover_tag_names(content) for path, content in file_contents.items()}

    native_used: list[str] = []
    for tags in tags_by_file.values():
        for tag in sorted(tags):
            lower = tag.lower()
            if lower in catalog.native_elements and lower not in native_used:
                native_used.append(lower)
    for tag in native_used:
        entry = catalog.native_elements[tag]
        mappings.append(MigrationMapping(
            source=tag, source_import_pattern=NATIVE_ELEMENT_PATTERN, target=entry.target,
            target_import_path=entry.target_import_path, complexity=entry.complexity,
            guidelines=entry.guidelines,
        ))

    component_dirs = settings.component_analysis.directories
    for path, tags in tags_by_file.items():
        relative_path = path.relative_to(scan_dir).as_posix()
        if any(relative_path.startswith(d) for d in component_dirs):
            continue
        for name in sorted(tags):
            if name.lower() in _NATIVE_HTML:
                continue
            add_component(name)

    logger.debug("Discovered %d migration mapping(s) for %s", len(mappings), catalog.name)
    return mappings
