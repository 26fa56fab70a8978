# --- CONFIGURATION ---
# --- Please update these values ---

# CSV File Details
INPUT_CSV_FILE = "urls.csv"
OUTPUT_CSV_FILE = "results.csv"
URL_COLUMN = "url"
RESULT_COLUMNS = ["url", "score", "metaTitle", "metaDescription"]

# --- Retry Settings ---

# Number of times to attempt an audit before giving up on a URL.
MAX_RETRIES = 3

# A timeout on this attempt ends the retries early (two timeouts in a row
# already cost two full audit timeouts).
TIMEOUT_RETRY_LIMIT = 2

# Pause before the first attempt and between retries, to go easy on the target server.
COURTESY_DELAY_SECONDS = 3

# --- Browser Settings ---
NAVIGATION_TIMEOUT_SECONDS = 60

# The page counts as loaded once no new network requests show up for this long.
NETWORK_IDLE_SECONDS = 0.5

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"

# --- Lighthouse Settings ---

# Lighthouse is a Node.js CLI: install it with `npm install -g lighthouse`.
LIGHTHOUSE_COMMAND = ["lighthouse"]
LIGHTHOUSE_CATEGORY = "accessibility"
AUDIT_TIMEOUT_SECONDS = 60

# The retry policy matches on this exact message.
AUDIT_TIMEOUT_MESSAGE = "Lighthouse audit timed out"

# --- Fallback Values ---
NO_META_DESCRIPTION = "No meta description"
NOT_AVAILABLE = "N/A"
