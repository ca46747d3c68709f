"""
Data model for extracted Solidity declarations.

Type descriptors are the resolved form of a Solidity type expression.
Declarations pair each queryable item's source spelling with its resolved
descriptors; the ABI rendering lives in codegen.abi.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..codegen.abi import AbiItem
    from ..codegen.diagnostics import Diagnostic


# =============================================================================
# TYPE DESCRIPTORS
# =============================================================================

@dataclass
class TypeDescriptor:
    """Base class for resolved types."""

    @property
    def abi_type(self) -> str:
        """The ABI JSON `type` string (e.g. 'uint256', 'tuple[]')."""
        raise NotImplementedError

    @property
    def canonical(self) -> str:
        """The form used in canonical signatures; tuples are expanded."""
        return self.abi_type

    def to_abi(self, name: str = '') -> Dict[str, Any]:
        """Render as an ABI JSON parameter."""
        return {'name': name, 'type': self.abi_type}

    def unresolved_names(self) -> List[str]:
        """Names of every unresolved type reachable from this descriptor."""
        return []

    @property
    def is_resolved(self) -> bool:
        return not self.unresolved_names()


@dataclass
class PrimitiveType(TypeDescriptor):
    """An elementary type such as uint256, address or bytes32."""
    name: str

    @property
    def abi_type(self) -> str:
        return self.name


@dataclass
class MappingType(TypeDescriptor):
    """
    A mapping, flattened to its ordered key list and final value.

    mapping(K1 => mapping(K2 => V)) has keys [K1, K2] and value V.
    """
    keys: List[TypeDescriptor]
    value: TypeDescriptor

    def __post_init__(self):
        if not self.keys:
            raise ValueError('a mapping needs at least one key type')

    @property
    def abi_type(self) -> str:
        rendered = self.value.abi_type
        for key in reversed(self.keys):
            rendered = f'mapping({key.abi_type} => {rendered})'
        return rendered

    def unresolved_names(self) -> List[str]:
        names: List[str] = []
        for key in self.keys:
            names.extend(key.unresolved_names())
        names.extend(self.value.unresolved_names())
        return names


@dataclass
class ArrayType(TypeDescriptor):
    """A fixed-size (`length` set) or dynamic array."""
    element: TypeDescriptor
    length: Optional[int] = None

    @property
    def suffix(self) -> str:
        return f'[{self.length}]' if self.length is not None else '[]'

    @property
    def abi_type(self) -> str:
        return self.element.abi_type + self.suffix

    @property
    def canonical(self) -> str:
        return self.element.canonical + self.suffix

    def to_abi(self, name: str = '') -> Dict[str, Any]:
        # Keep the element's components, only the type string changes
        rendered = self.element.to_abi(name)
        rendered['type'] = self.abi_type
        return rendered

    def unresolved_names(self) -> List[str]:
        return self.element.unresolved_names()


@dataclass
class Component:
    """A named member of a tuple."""
    name: str
    type: TypeDescriptor


@dataclass
class TupleType(TypeDescriptor):
    """A struct expanded into its resolved members."""
    components: List[Component] = field(default_factory=list)
    struct_name: str = ''

    @property
    def abi_type(self) -> str:
        return 'tuple'

    @property
    def canonical(self) -> str:
        return '(' + ','.join(c.type.canonical for c in self.components) + ')'

    def to_abi(self, name: str = '') -> Dict[str, Any]:
        return {
            'name': name,
            'type': self.abi_type,
            'components': [c.type.to_abi(c.name) for c in self.components],
        }

    def unresolved_names(self) -> List[str]:
        names: List[str] = []
        for component in self.components:
            names.extend(component.type.unresolved_names())
        return names


@dataclass
class UnresolvedType(TypeDescriptor):
    """A custom type that is not defined in the parsed source."""
    raw_name: str

    @property
    def abi_type(self) -> str:
        return self.raw_name

    def unresolved_names(self) -> List[str]:
        return [self.raw_name]


# =============================================================================
# DECLARATIONS
# =============================================================================

@dataclass
class Param:
    """
    A parameter or return value.

    `type` is the source spelling with storage locations removed, kept for
    display; `descriptor` is what it resolved to.
    """
    name: str
    type: str
    descriptor: TypeDescriptor

    def to_abi(self) -> Dict[str, Any]:
        return self.descriptor.to_abi(self.name)


@dataclass
class Declaration:
    """One queryable item: a public state variable getter or a view/pure function."""
    name: str
    inputs: List[Param] = field(default_factory=list)
    outputs: List[Param] = field(default_factory=list)
    state_mutability: str = 'view'
    kind: str = 'function'  # 'function' or 'variable'
    line: Optional[int] = None

    @property
    def signature(self) -> str:
        """Canonical signature, e.g. 'balanceOf(address)'."""
        types = ','.join(p.descriptor.canonical for p in self.inputs)
        return f'{self.name}({types})'

    @property
    def selector(self) -> str:
        """The 4-byte function selector as 0x-prefixed hex."""
        # Import here to avoid circular imports
        from ..codegen.signatures import function_selector
        return function_selector(self.signature)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'inputs': [{'name': p.name, 'type': p.type} for p in self.inputs],
            'outputs': [{'name': p.name, 'type': p.type} for p in self.outputs],
            'stateMutability': self.state_mutability,
        }


@dataclass
class StateVariableMatch:
    """A state variable declaration found by the scanner, before resolution."""
    type: str
    name: str
    index: int
    visibility: str = 'internal'


@dataclass
class FunctionMatch:
    """A function header found by the scanner, before resolution."""
    name: str
    params: str
    returns: Optional[str]
    index: int
    visibility: str = 'public'
    state_mutability: str = 'nonpayable'


@dataclass
class ParseOptions:
    """Options for contract parsing."""
    # Include private/internal functions and state variables
    include_private: bool = False
    # Drop declarations with unresolved custom types (with a diagnostic)
    validate_custom_types: bool = True


@dataclass
class ParseResult:
    """
    Result of parsing a Solidity source.

    `declarations[i]` and `abi_items[i]` always describe the same item.
    """
    declarations: List[Declaration] = field(default_factory=list)
    abi_items: List['AbiItem'] = field(default_factory=list)
    diagnostics: List['Diagnostic'] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        """Diagnostic messages as plain strings."""
        return [d.message for d in self.diagnostics]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'declarations': [d.to_dict() for d in self.declarations],
            'abiItems': [item.to_dict() for item in self.abi_items],
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }
