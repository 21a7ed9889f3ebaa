"""
Configuration constants for wgconf.
These are immutable system constants, not runtime configuration.
"""

# Cryptographic constants
HASH_ALGORITHM = "sha256"
KEY_SIZE_BYTES = 32
IDENTIFIER_LENGTH = 43  # URL-safe base64 of 32 bytes, unpadded
ENCODED_KEY_LENGTH = 44  # Standard base64 of 32 bytes, padded

# X25519 clamping masks
CLAMP_LOW_MASK = 248
CLAMP_HIGH_MASK = 127
CLAMP_HIGH_BIT = 64

# Template context
PRIVATE_KEY_VAR = "private_key"
PUBLIC_KEY_VAR = "public_key"
DEFAULT_VARS_KEY = "vars"

# Template fields
INTERFACE_TEMPLATE_FIELD = "interface_template"
PEER_TEMPLATE_FIELD = "peer_template"

# Template syntax
VARIABLE_START = "${"
VARIABLE_END = "}"
BLOCK_START = "%{"
BLOCK_END = "}"
COMMENT_START = "%{#"
COMMENT_END = "#}"
TEMPLATE_NAME = "<template_file>"

# Render error kinds
RENDER_PARSE = "parse"
RENDER_EVALUATION = "evaluation"
RENDER_COERCION = "coercion"

# Aggregation
SECTION_SEPARATOR = "\n\n"
IDENTITY_LENGTH = 64  # Hex-encoded SHA-256
