from typing import TypedDict


class RuleRegistryEntry(TypedDict, total=False):
    display_name: str
    symbol: str
    short_description: str
    manual_instructions: str
    references: list[str]
