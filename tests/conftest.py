"""Shared pytest fixtures for the ds-coverage test suite."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from dscoverage.config.settings import DsCoverageSettings

BUTTON_COMPONENT = textwrap.dedent("""\
    import * as React from "react"
    import { Slot } from "@radix-ui/react-slot"
    import { cva, type VariantProps } from "class-variance-authority"

    const buttonVariants = cva("inline-flex items-center", {
      variants: {
        appearance: {
          primary: "bg-primary text-primary-foreground",
          secondary: "bg-secondary",
        },
        hierarchy: {
          high: "",
          low: "",
        },
        size: {
          small: "h-8 px-3",
          default: "h-10 px-4",
          large: "h-12 px-6",
        },
      },
      compoundVariants: [
        { appearance: "primary", hierarchy: "low", className: "bg-transparent" },
      ],
      defaultVariants: { appearance: "primary", hierarchy: "high", size: "default" },
    })

    export function Button({ className, appearance, hierarchy, size, asChild = false, ...props }) {
      const Comp = asChild ? Slot : "button"
      return <Comp className={cn(buttonVariants({ appearance, hierarchy, size }), className)} {...props} />
    }
""")

BADGE_COMPONENT = textwrap.dedent("""\
    import { cva } from "class-variance-authority"

    const badgeVariants = cva("rounded-md px-2 text-xs", {
      variants: {
        variant: {
          default: "bg-blue-500 text-white",
          destructive: "bg-red-500 text-white",
          outline: "border",
        },
        size: {
          sm: "h-6",
          lg: "h-8",
        },
      },
    })

    export function Badge({ variant, size, ...props }) {
      return <span {...props} />
    }
""")

LEGACY_CARD = textwrap.dedent("""\
    export const Card = ({ className, children }) => (
      <div className={className}>{children}</div>
    )
""")

APP_PAGE = textwrap.dedent("""\
    import { Button } from "@company/ui"

    export default function Page() {
      return (
        <main className="bg-gray-100 text-sm rounded-lg">
          {/* @ds-migrate: simple */}
          <Button>Save</Button>
          <Button>Cancel</Button>
        </main>
      )
    }
""")

SETTINGS_PAGE = textwrap.dedent("""\
    // @ds-todo replace the native controls
    export function SettingsForm() {
      return (
        <form className="shadow-lg">
          <input type="text" />
          <select name="theme"></select>
        </form>
      )
    }
""")

CLEAN_PAGE = textwrap.dedent("""\
    export function About() {
      return <p className="text-muted-foreground">About us</p>
    }
""")

COMMENTED_PAGE = textwrap.dedent("""\
    // bg-gray-100 rounded-lg shadow-md
    /* dark:bg-black */
     * text-sm font-bold
    export const x = 1
""")


def write_project(root: Path, files: dict[str, str], config: str | None = None) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    if config is not None:
        (root / "ds-coverage.yaml").write_text(config, encoding="utf-8")
    return root


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    return write_project(tmp_path, {
        "src/components/ui/button.tsx": BUTTON_COMPONENT,
        "src/components/ui/badge.tsx": BADGE_COMPONENT,
        "src/components/ui/index.ts": "export * from './button'\n",
        "src/components/common/Card.tsx": LEGACY_CARD,
        "src/app/page.tsx": APP_PAGE,
        "src/app/settings/page.tsx": SETTINGS_PAGE,
        "src/app/about.tsx": CLEAN_PAGE,
        "src/app/page.test.tsx": "const x = 'bg-red-500'\n",
        "src/stories/Button.stories.tsx": "const y = 'bg-red-500'\n",
    })


@pytest.fixture
def default_settings() -> DsCoverageSettings:
    return DsCoverageSettings()
