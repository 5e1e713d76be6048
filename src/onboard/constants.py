"""Global constants for the Onboard service.

Labels and identifiers shared by the device API, the check list and the
terminal wizard.
"""

# Step identifiers that frame the configured fields
START_STEP = "start"
SUBMIT_STEP = "submit"

# Labels of the built-in verification checks
NETWORK_CHECK_LABEL = "Bringing Up Network"
ADDRESS_CHECK_LABEL = "Getting IP Address"
DNS_CHECK_LABEL = "Testing DNS"
DONE_CHECK_LABEL = "Done"

# Link operational state reported once the interface carries traffic
LINK_STATE_UP = "up"

API_PREFIX = "/api/v1"
