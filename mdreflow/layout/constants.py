# Target line width, prefixes included when sizing horizontal rules.
WIDTH = 80

# Inline code longer than this gets a line of its own.
CODE_WRAP_LENGTH = 20

# Rules nested deeper than this fall back to MIN_RULE_WIDTH dashes.
RULE_PREFIX_LIMIT = 70
MIN_RULE_WIDTH = 10

CLAUSE_DELIMITERS = ",?!:;."
