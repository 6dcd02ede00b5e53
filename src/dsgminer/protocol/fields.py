"""Protocol constants.

Keep these in one place to avoid stringly-typed request handling.
"""

# Routing path tag for this protocol's command channel.
REQ_PATH = "dsg_local_commands"

# API levels understood by the transport. Requests from this client are
# always delivered at the router level.
LEVEL_NOC = "noc"
LEVEL_NON = "non"
LEVEL_ROUTER = "router"

LEVELS = (LEVEL_NOC, LEVEL_NON, LEVEL_ROUTER)

# Object category for a JSON envelope, and the envelope format version.
JSON_OBJECT_CATEGORY = 50001
FORMAT_VERSION = 0

# Discriminators are carried as an unsigned 16-bit integer.
OBJ_TYPE_MIN = 0
OBJ_TYPE_MAX = 0xFFFF
