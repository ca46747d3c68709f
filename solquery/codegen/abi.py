"""
ABI rendering for extracted declarations.

An AbiItem is the ABI JSON form of a Declaration: custom types are fully
expanded (structs to tuples with components, enums to uint8), while the
Declaration keeps the source spelling for display.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..parser.ast_nodes import Declaration


@dataclass
class AbiItem:
    """A single ABI JSON function entry."""
    name: str
    inputs: List[Dict[str, Any]] = field(default_factory=list)
    outputs: List[Dict[str, Any]] = field(default_factory=list)
    state_mutability: str = 'view'
    type: str = 'function'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': self.type,
            'name': self.name,
            'inputs': self.inputs,
            'outputs': self.outputs,
            'stateMutability': self.state_mutability,
        }


def build_abi_item(declaration: Declaration) -> AbiItem:
    """Render a declaration as an ABI item."""
    return AbiItem(
        name=declaration.name,
        inputs=[p.to_abi() for p in declaration.inputs],
        outputs=[p.to_abi() for p in declaration.outputs],
        state_mutability=declaration.state_mutability,
    )


def abi_to_json(items: List[AbiItem], indent: int = 2) -> str:
    """Serialize ABI items as an ABI JSON array."""
    return json.dumps([item.to_dict() for item in items], indent=indent)
