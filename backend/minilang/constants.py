"""Names and limits shared across the compiler phases."""

KEYWORDS = frozenset({
    'if', 'else', 'while', 'for', 'return',
    'int', 'float', 'void', 'string', 'bool',
    'true', 'false', 'null', 'function', 'var',
})

# Tokens that begin a new declaration/statement; the parser resynchronizes on them.
SYNC_KEYWORDS = frozenset({'CLASS', 'FUNCTION', 'VAR', 'FOR', 'IF', 'WHILE', 'RETURN'})

MAX_PARAMETERS = 255
MAX_ARGUMENTS = 255

# `$` can never start a source identifier, so temporaries cannot collide with user names.
TEMP_PREFIX = '$t'

PRINT_BUILTIN = 'printValue'
