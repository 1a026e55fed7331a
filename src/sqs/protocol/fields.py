"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

CRLF = "\r\n"

# Unsolicited greeting sent by the broker on accept.
GREETING = "HELO SERVER"

# Replies
OK = "OK"
OK_WITH_VALUE = "OK:"
ERROR = "ERROR:"

# Configuration section
START_CONFIG = "START_CONFIG"
END_CONFIG = "END_CONFIG"
QUEUE = "QUEUE"
ROLE = "ROLE"

# Producer sections
START_METADATA = "START_METADATA"
END_METADATA = "END_METADATA"
START_MESSAGE = "START_MESSAGE"
END_MESSAGE = "END_MESSAGE"
DELIVER_DATE = "DELIVER_DATE"
DELIVER_TIMESTAMP = "DELIVER_TIMESTAMP"

# Consumer section
START_GET_MESSAGE = "START_GET_MESSAGE"
END_GET_MESSAGE = "END_GET_MESSAGE"

# Commands, valid in any section
QUIT = "QUIT"
