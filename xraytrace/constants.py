CLIENT_SEND = "cs"
CLIENT_RECV = "cr"
SERVER_SEND = "ss"
SERVER_RECV = "sr"

# Events marking the receiving side of an RPC
START_EVENTS = frozenset([CLIENT_RECV, SERVER_RECV])
RPC_EVENTS = frozenset([CLIENT_SEND, CLIENT_RECV, SERVER_SEND, SERVER_RECV])

LOCAL_COMPONENT = "lc"
SERVER_ADDR = "sa"
PEER_SERVICE_TAG = "peer.service"
INSTANCE_ID_TAG = "instance_id"

UNKNOWN_PROCESS_ID = "unknown"
