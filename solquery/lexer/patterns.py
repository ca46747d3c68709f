"""
Keyword tables and regular expressions for Solidity declaration scanning.

The scanner never tokenizes a whole file; it composes these small patterns
with the balanced-delimiter helpers instead.
"""

import re


# =============================================================================
# KEYWORDS
# =============================================================================

VISIBILITY = frozenset({'public', 'private', 'internal', 'external'})
HIDDEN_VISIBILITY = frozenset({'private', 'internal'})

STATE_MUTABILITY = frozenset({'view', 'pure', 'payable', 'nonpayable'})
QUERYABLE_MUTABILITY = frozenset({'view', 'pure'})

# Keywords that may sit between a state variable's type and its name
VARIABLE_MODIFIERS = frozenset({
    'public', 'private', 'internal', 'constant', 'immutable',
    'override', 'virtual', 'transient',
})

# A '{' opened after one of these keywords starts an executable body
BODY_KEYWORDS = frozenset({
    'function', 'modifier', 'constructor', 'fallback', 'receive',
})

# Statements at contract level that can never be state variables
NON_VARIABLE_STATEMENTS = frozenset({
    'function', 'event', 'error', 'modifier', 'struct', 'enum', 'using',
    'import', 'pragma', 'type', 'constructor', 'receive', 'fallback',
    'return', 'emit', 'delete', 'revert', 'require', 'assert',
})


# =============================================================================
# PATTERNS
# =============================================================================

# Storage locations anywhere in a clause ("Type memory name")
STORAGE_LOCATION = re.compile(r'\b(?:memory|storage|calldata)\b')

# Type with an optional parameter name: "IERC20 token", "uint256[] values"
TYPE_WITH_NAME = re.compile(r'^([a-zA-Z_$][\w$.\[\]]*)(?:\s+([a-zA-Z_$][\w$]*))?$')

# Leading identifier
VAR_NAME = re.compile(r'^([a-zA-Z_$][\w$]*)')

IDENTIFIER = re.compile(r'^[a-zA-Z_$][\w$]*$')

MAPPING_START = re.compile(r'^mapping\s*\(')

# Elementary type families; anything else capitalised is a custom type
BUILTIN_TYPES = re.compile(r'^(?:uint|int|bytes|address|bool|string|mapping)')

# One or more trailing array dimensions: "[]", "[3]", "[][2]"
ARRAY_SUFFIX = re.compile(r'^(.*?)((?:\s*\[\s*\w*\s*\])+)\s*$', re.DOTALL)
ARRAY_DIMENSION = re.compile(r'\[\s*(\w*)\s*\]')

# "address payable" is an address in the ABI
ADDRESS_PAYABLE = re.compile(r'\baddress\s+payable\b')

# override(A, B) lists on variables and functions
OVERRIDE_LIST = re.compile(r'\boverride\s*\([^)]*\)')

# Type definitions
ENUM_DEF = re.compile(r'\benum\s+([a-zA-Z_$][\w$]*)\s*\{')
STRUCT_DEF = re.compile(r'\bstruct\s+([a-zA-Z_$][\w$]*)\s*\{')
ALIAS_DEF = re.compile(r'\btype\s+([a-zA-Z_$][\w$]*)\s+is\s+([a-zA-Z_$][\w$.]*)\s*;')
CONTRACT_DEF = re.compile(r'\b(contract|interface|library)\s+([a-zA-Z_$][\w$]*)')

# Struct member: everything before the trailing identifier is the type
STRUCT_MEMBER = re.compile(r'^(.*\S)\s+([a-zA-Z_$][\w$]*)$', re.DOTALL)

# "function name(": the parameter list is extracted with the scanner
FUNCTION_HEAD = re.compile(r'\bfunction\s+([a-zA-Z_$][\w$]*)\s*\(')

WORD = re.compile(r'[a-zA-Z_$][\w$]*')
