import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Output Settings ---
# Any of "1", "true", "yes" turns on per-operation engine output
VERBOSE = (os.getenv("VENDSIM_VERBOSE") or "").lower() in ("1", "true", "yes")

# --- Demo Machine ---
# Coin kinds are kept in the declared order; change-making walks them from the last one back
DEMO_COIN_KINDS = [5, 10, 25, 100, 200]
DEMO_POP_NAMES = ["Coke", "Water", "Sprite", "Root Beer"]
DEMO_POP_COSTS = [250, 150, 225, 200]
DEMO_COIN_COUNTS = [20, 20, 20, 5, 2]
DEMO_POP_COUNTS = [10, 15, 10, 8]

# --- Client Traffic Settings ---
# Lambda represents the average number of clients per simulation run
CLIENT_LAMBDA = int(os.getenv("CLIENT_LAMBDA") or 12)

# --- Paths ---
SCRIPTS_DIR = os.getenv("SCRIPTS_DIR") or "data/scripts"
RESULTS_DIR = os.getenv("RESULTS_DIR") or "data/results"
SCRIPT_RESULTS_CSV = os.path.join(RESULTS_DIR, "script_history.csv")
