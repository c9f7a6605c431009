#!/usr/bin/env python3
"""Lightweight validator for the budget planner's JSON configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

CONFIG_PATH = Path(__file__).resolve().parents[1] / "budget_planner" / "lib" / "config" / "budget.json"

CATEGORIES = {"need", "want", "saving"}
LANGUAGES = ("ar", "en")


def validate_config(data: Dict[str, Any]) -> List[str]:
    errors = []

    for block in ("constants", "default_rule", "labels", "colors", "mapping", "checklist", "texts"):
        if block not in data:
            errors.append(f"missing '{block}' block")
    if errors:
        return errors

    rule = data["default_rule"]
    for key in ("needs", "wants", "savings"):
        if not isinstance(rule.get(key), (int, float)) or rule[key] < 0:
            errors.append(f"default_rule.{key} must be a non-negative number")

    for lang in LANGUAGES:
        labels = data["labels"].get(lang, {})
        missing = CATEGORIES - set(labels)
        if missing:
            errors.append(f"labels.{lang} missing {sorted(missing)}")

        for name, category in data["mapping"].get(lang, {}).items():
            if category not in CATEGORIES:
                errors.append(f"mapping.{lang}['{name}'] has unknown category '{category}'")

        for index, item in enumerate(data["checklist"].get(lang, [])):
            if not item.get("name") or not item.get("description"):
                errors.append(f"checklist.{lang}[{index}] needs a name and a description")

    text_keys = [set(data["texts"].get(lang, {})) for lang in LANGUAGES]
    for lang, keys in zip(LANGUAGES, text_keys):
        missing = set().union(*text_keys) - keys
        if missing:
            errors.append(f"texts.{lang} missing {sorted(missing)}")

    for category in CATEGORIES:
        if category not in data["colors"]:
            errors.append(f"colors missing '{category}'")

    return errors


def main() -> int:
    if not CONFIG_PATH.exists():
        print(f"Config file not found: {CONFIG_PATH}")
        return 1

    with CONFIG_PATH.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    issues = validate_config(data)
    if issues:
        print("Config validation failed:")
        for message in issues:
            print(f"  - {message}")
        return 1

    print("Config validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
