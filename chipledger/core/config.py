import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

LOG_LEVEL = os.getenv("CHIPLEDGER_LOG_LEVEL", "INFO").upper()
LOGS_DIR = os.getenv("CHIPLEDGER_LOGS_DIR", "logs")

# Anything other than an explicit "false"/"0"/"no" keeps the file sinks on
LOG_TO_FILE = os.getenv("CHIPLEDGER_LOG_TO_FILE", "true").strip().lower() not in {
    "false",
    "0",
    "no",
}

# Money is settled in the group's currency, to the cent
MONEY_DECIMALS = 2

# Rounding rule percentage must fall in (0, 100]
MIN_ROUNDING_PERCENTAGE = 1
MAX_ROUNDING_PERCENTAGE = 100
DEFAULT_ROUNDING_PERCENTAGE = 80
