# Library
SDK_NAME = "devcycle-python-client"
SDK_VERSION = "1.0.0"
SDK_TYPE = "server"
SDK_PLATFORM = "Python"
USER_AGENT = f"DevCycle-Server-SDK/{SDK_VERSION}/python"
REQUEST_TIMEOUT = 5
MIN_REQUEST_TIMEOUT = 5
APPLICATION_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": USER_AGENT,
}

# Environment key prefixes accepted by the bucketing API
VALID_SDK_KEY_PREFIXES = ("server", "dvc_server")

# URLs
BUCKETING_API_URL = "https://bucketing-api.devcycle.com"
VARIABLES_URL = "/v1/variables"
VARIABLE_URL = "/v1/variables/{key}"
FEATURES_URL = "/v1/features"
TRACK_URL = "/v1/track"
EDGE_DB_QUERY_PARAM = "enableEdgeDB"
