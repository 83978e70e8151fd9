# AI INSTRUCTION:
# Provide a read-only persona registry that:
#  - loads personas.yaml in this folder once, at process start
#  - maps tool identifiers to persona text, with an explicit default arm
#  - exposes the reasoning overlay used when the caller asks for deeper analysis
#  - never mutates after construction (safe for concurrent readers)

from __future__ import annotations

import os
from types import MappingProxyType
from typing import List, Mapping, Optional

import yaml

from .types import Persona

PERSONAS_PATH = os.path.join(os.path.dirname(__file__), "personas.yaml")


class PersonaRegistry:
    def __init__(self, default: Persona, reasoning_text: str, tools: Mapping[str, Persona]):
        self._default = default
        self._reasoning_text = reasoning_text
        self._tools = MappingProxyType(dict(tools))

    # -------------------------
    # Loaders
    # -------------------------
    @classmethod
    def from_yaml(cls, path: str = PERSONAS_PATH) -> "PersonaRegistry":
        if not os.path.exists(path):
            raise FileNotFoundError(f"personas.yaml not found at {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "PersonaRegistry":
        d = data.get("default") or {}
        if not d.get("text"):
            raise ValueError("Persona table is missing 'default.text'")
        r = data.get("reasoning") or {}
        if not r.get("text"):
            raise ValueError("Persona table is missing 'reasoning.text'")

        tools = {}
        for key, p in (data.get("tools") or {}).items():
            if not (p or {}).get("text"):
                raise ValueError(f"Persona '{key}' has no text")
            tools[key] = Persona(
                key=key,
                name=p.get("name", key),
                text=p["text"].strip(),
                description=p.get("description", ""),
            )

        default = Persona(key="default", name=d.get("name", "default"), text=d["text"].strip())
        return cls(default=default, reasoning_text=r["text"].strip(), tools=tools)

    # -------------------------
    # Lookups
    # -------------------------
    @property
    def default(self) -> Persona:
        return self._default

    @property
    def reasoning_text(self) -> str:
        return self._reasoning_text

    def get(self, tool_id: Optional[str]) -> Persona:
        """Persona for tool_id, or the default persona when absent or unknown."""
        key = (tool_id or "").strip()
        return self._tools.get(key, self._default)

    def lookup(self, tool_id: Optional[str]) -> str:
        return self.get(tool_id).text

    def is_known(self, tool_id: Optional[str]) -> bool:
        return (tool_id or "").strip() in self._tools

    def tools(self) -> List[Persona]:
        return list(self._tools.values())
