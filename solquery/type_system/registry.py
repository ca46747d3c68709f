"""
Type registry for custom Solidity types.

The TypeRegistry performs a first pass over comment-stripped Solidity
source to collect struct, enum, user-defined value type and contract
names, then resolves type references against them:

- enums collapse to uint8
- structs expand to tuples of their resolved members
- `type X is Y` aliases resolve to Y
- contract and interface names resolve to address

Qualified references (`A.B.Name`) are looked up by their last part.
Structs form a graph keyed by name; resolution walks it depth first with
the set of structs currently being expanded, so a cycle degrades to an
UnresolvedType instead of recursing forever.
"""

import re
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from ..lexer import strip_comments, extract_balanced, split_top_level, patterns
from ..parser.ast_nodes import (
    TypeDescriptor,
    PrimitiveType,
    MappingType,
    ArrayType,
    Component,
    TupleType,
    UnresolvedType,
)
from ..parser.mappings import is_mapping, mapping_keys, final_value_type
from ..parser.parameters import is_custom_type
from .primitives import canonical_primitive, normalize_spacing


class TypeRegistry:
    """
    Registry of custom types discovered in Solidity source.

    Collects:
    - Structs (member names and raw member types, in order)
    - Enums
    - User-defined value type aliases
    - Contracts and interfaces (libraries are not value types)
    """

    def __init__(self):
        self.structs: Dict[str, List[Tuple[str, str]]] = {}
        self.enums: Set[str] = set()
        self.aliases: Dict[str, str] = {}
        self.contracts: Set[str] = set()
        self.interfaces: Set[str] = set()

    @classmethod
    def from_source(cls, source: str) -> 'TypeRegistry':
        """Build a registry from a single source string."""
        registry = cls()
        registry.discover_from_source(source)
        return registry

    # =========================================================================
    # DISCOVERY
    # =========================================================================

    def discover_from_source(self, source: str) -> None:
        """Discover types from a single Solidity source string."""
        cleaned = strip_comments(source)
        self._discover_enums(cleaned)
        self._discover_structs(cleaned)
        self._discover_aliases(cleaned)
        self._discover_contracts(cleaned)

    def discover_from_file(self, filepath: str) -> None:
        """Discover types from a Solidity file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()
        self.discover_from_source(source)

    def discover_from_directory(self, directory: str, pattern: str = '**/*.sol') -> None:
        """Discover types from all Solidity files in a directory."""
        base_dir = Path(directory)
        for sol_file in sorted(base_dir.glob(pattern)):
            try:
                self.discover_from_file(str(sol_file))
            except (OSError, UnicodeDecodeError) as e:
                print(f"Warning: Could not read {sol_file} for type discovery: {e}")

    def _discover_enums(self, source: str) -> None:
        for match in patterns.ENUM_DEF.finditer(source):
            self.enums.add(match.group(1))

    def _discover_structs(self, source: str) -> None:
        for match in patterns.STRUCT_DEF.finditer(source):
            name = match.group(1)
            extracted = extract_balanced(source, match.end() - 1, '{', '}')
            if extracted is None:
                continue
            body, _ = extracted
            members: List[Tuple[str, str]] = []
            for member in split_top_level(body, ';'):
                member_match = patterns.STRUCT_MEMBER.match(normalize_spacing(member))
                if member_match:
                    members.append((member_match.group(2), member_match.group(1).strip()))
            if members and name not in self.structs:
                self.structs[name] = members

    def _discover_aliases(self, source: str) -> None:
        for match in patterns.ALIAS_DEF.finditer(source):
            self.aliases.setdefault(match.group(1), match.group(2))

    def _discover_contracts(self, source: str) -> None:
        for match in patterns.CONTRACT_DEF.finditer(source):
            kind, name = match.group(1), match.group(2)
            if kind == 'interface':
                self.interfaces.add(name)
            elif kind == 'contract':
                self.contracts.add(name)

    def merge(self, other: 'TypeRegistry') -> None:
        """Merge another registry into this one; existing definitions win."""
        for name, members in other.structs.items():
            self.structs.setdefault(name, list(members))
        for name, underlying in other.aliases.items():
            self.aliases.setdefault(name, underlying)
        self.enums.update(other.enums)
        self.contracts.update(other.contracts)
        self.interfaces.update(other.interfaces)

    # =========================================================================
    # LOOKUP
    # =========================================================================

    @staticmethod
    def unqualified(type_name: str) -> str:
        """Get the last part of a qualified name ('A.B.Name' -> 'Name')."""
        return type_name.strip().split('.')[-1]

    def custom_type_names(self) -> List[str]:
        """All custom type names, longest first."""
        names = set(self.structs) | self.enums | set(self.aliases)
        names |= self.contracts | self.interfaces
        return sorted(names, key=lambda n: (-len(n), n))

    def can_resolve(self, type_name: str) -> bool:
        """
        Check whether a type resolves completely.

        Elementary types always do; custom types only when defined here.
        """
        return self.describe(type_name).is_resolved

    def struct_components(self, name: str) -> Optional[List[dict]]:
        """Get the ABI components of a struct, or None if it is unknown."""
        base = self.unqualified(name)
        if base not in self.structs:
            return None
        return self.describe(base).to_abi()['components']

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve(self, type_name: str) -> Optional[TypeDescriptor]:
        """
        Resolve a type expression.

        Returns:
            The resolved descriptor, or None when the type itself cannot be
            resolved. A struct whose members are partly unresolved still
            resolves to a tuple containing UnresolvedType members.
        """
        descriptor = self.describe(type_name)
        if isinstance(descriptor, UnresolvedType):
            return None
        return descriptor

    def describe(self, type_name: str) -> TypeDescriptor:
        """Resolve a type expression, using UnresolvedType for failures."""
        return self._resolve(type_name, frozenset())

    def _resolve(self, type_name: str, visiting: FrozenSet[str]) -> TypeDescriptor:
        text = normalize_spacing(patterns.STORAGE_LOCATION.sub(' ', type_name))
        text = patterns.ADDRESS_PAYABLE.sub('address', text)
        if not text:
            return UnresolvedType(type_name.strip())

        base, dimensions = _split_array(text)
        if dimensions:
            descriptor = self._resolve(base, visiting)
            for length in dimensions:
                descriptor = ArrayType(descriptor, length)
            return descriptor

        if is_mapping(text):
            keys = [self._resolve(key, visiting) for key in mapping_keys(text)]
            if not keys:
                return UnresolvedType(text)
            return MappingType(keys, self._resolve(final_value_type(text), visiting))

        name = self.unqualified(text)

        if name in self.enums:
            return PrimitiveType('uint8')

        if name in self.structs:
            if name in visiting:
                return UnresolvedType(text)
            inner = visiting | {name}
            components = [
                Component(member, self._resolve(raw_type, inner))
                for member, raw_type in self.structs[name]
            ]
            return TupleType(components, struct_name=name)

        if name in self.aliases:
            if name in visiting:
                return UnresolvedType(text)
            underlying = self._resolve(self.aliases[name], visiting | {name})
            if isinstance(underlying, UnresolvedType):
                return UnresolvedType(text)
            return underlying

        if name in self.contracts or name in self.interfaces:
            return PrimitiveType('address')

        if is_custom_type(text):
            return UnresolvedType(text)
        return PrimitiveType(canonical_primitive(text))

    # =========================================================================
    # TEXTUAL SUBSTITUTION
    # =========================================================================

    def canonical_type(self, type_name: str) -> str:
        """Get the canonical signature spelling of a type expression."""
        return self.describe(type_name).canonical

    def substitute(self, type_expr: str) -> str:
        """
        Replace every custom type name in a type expression.

        Names are matched on word boundaries, longest first, so 'Foo' never
        matches inside 'FooBar'. A qualified reference ('IPool.Slot0') is
        replaced as a whole. Structs become their canonical tuple form.

        Example:
            # with `struct Pair { uint256 a; address b; }`
            registry.substitute('Pair[] memory pairs')
            # '(uint256,address)[] memory pairs'
        """
        result = type_expr
        for name in self.custom_type_names():
            pattern = _reference_pattern(name)
            if not pattern.search(result):
                continue
            replacement = self.canonical_type(name)
            result = pattern.sub(lambda _m: replacement, result)
        return result


def _reference_pattern(name: str) -> 're.Pattern':
    return re.compile(
        r'(?<![\w$.])(?:[a-zA-Z_$][\w$]*\.)*' + re.escape(name) + r'(?![\w$])'
    )


def _split_array(type_str: str) -> Tuple[str, List[Optional[int]]]:
    """
    Split trailing array dimensions off a type, innermost first.

    'uint256[2][]' -> ('uint256', [2, None])
    """
    type_str = type_str.strip()
    if not type_str.endswith(']'):
        return type_str, []
    match = patterns.ARRAY_SUFFIX.match(type_str)
    if not match or not match.group(1).strip():
        return type_str, []
    dimensions: List[Optional[int]] = []
    for size in patterns.ARRAY_DIMENSION.findall(match.group(2)):
        dimensions.append(int(size) if size.isdigit() else None)
    return match.group(1).strip(), dimensions
